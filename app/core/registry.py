from __future__ import annotations

from typing import Dict, Iterable

from app.config import PageConfig


class PageRegistry:
    """Facebook pages the relay serves, keyed by page id."""

    def __init__(self, pages: Iterable[PageConfig] = ()) -> None:
        self._pages: Dict[str, PageConfig] = {}
        for page in pages:
            self.register_page(page)

    def register_page(self, page: PageConfig) -> None:
        if page.id in self._pages:
            raise ValueError(f"Page already registered: {page.id}")
        self._pages[page.id] = page

    def get_page(self, page_id: str) -> PageConfig | None:
        return self._pages.get(page_id)

    def list_pages(self) -> list[PageConfig]:
        return list(self._pages.values())

    def as_mapping(self) -> Dict[str, PageConfig]:
        return dict(self._pages)

    def __len__(self) -> int:
        return len(self._pages)
