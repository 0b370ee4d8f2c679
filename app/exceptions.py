"""
Typed failures raised by relay components.

Services raise these; only the relay orchestrator and the action router turn
them into operator-visible notices.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for relay failures."""


class NotFoundError(RelayError):
    """A mapping, pending reply, customer or catalog entry does not exist."""


class TranslationError(RelayError):
    """The translation service failed or timed out."""


class TransportError(RelayError):
    """A customer-channel or operator-channel API call failed."""


class StorageError(RelayError):
    """The persistence store rejected or failed a read or write."""
