"""Tests for PageRegistry."""

import pytest

from app.config import PageConfig
from app.core.registry import PageRegistry


def test_register_and_lookup(page):
    registry = PageRegistry([page])
    assert registry.get_page("p1") == page
    assert registry.get_page("p2") is None
    assert len(registry) == 1
    assert registry.as_mapping() == {"p1": page}


def test_duplicate_page_rejected(page):
    registry = PageRegistry([page])
    with pytest.raises(ValueError):
        registry.register_page(PageConfig(id="p1", name="Again", token="t"))


def test_list_pages_keeps_registration_order():
    pages = [PageConfig(id=f"p{i}", name=f"Shop {i}", token="t") for i in range(3)]
    assert [p.id for p in PageRegistry(pages).list_pages()] == ["p0", "p1", "p2"]
