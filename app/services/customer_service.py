"""
Identity resolution for customer-channel senders.

One Customer row per (external user, page). First contact inserts the row;
concurrent first contacts are settled by the unique constraint (the loser
rolls back and reads the winner's row).
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.adapters.messenger import placeholder_name
from app.exceptions import StorageError, TransportError
from app.models.customer import Customer
from app.schemas.relay import CustomerProfile

logger = logging.getLogger(__name__)

# (external_user_id, page_token) -> profile; raises TransportError on failure
ProfileFetcher = Callable[[str, str], Awaitable[CustomerProfile]]


class CustomerService:
    """Resolve and read customers."""

    def __init__(
        self, db: Session, profile_fetcher: Optional[ProfileFetcher] = None
    ) -> None:
        self.db = db
        self._fetch_profile = profile_fetcher

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Fetch a customer by ID."""
        try:
            return self.db.query(Customer).filter(Customer.id == customer_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"customer lookup failed: {e}") from e

    def get_by_external_id(
        self, external_user_id: str, page_id: str
    ) -> Optional[Customer]:
        try:
            return (
                self.db.query(Customer)
                .filter(
                    Customer.external_user_id == external_user_id,
                    Customer.page_id == page_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"customer lookup failed: {e}") from e

    async def _profile(self, external_user_id: str, page_token: Optional[str]) -> CustomerProfile:
        if self._fetch_profile is None or not page_token:
            return CustomerProfile(display_name=placeholder_name(external_user_id))
        try:
            profile = await self._fetch_profile(external_user_id, page_token)
        except TransportError as e:
            logger.warning("Profile fetch failed for %s: %s", external_user_id, e)
            return CustomerProfile(display_name=placeholder_name(external_user_id))
        if not (profile.display_name or "").strip():
            return CustomerProfile(
                display_name=placeholder_name(external_user_id), avatar=profile.avatar
            )
        return profile

    async def resolve(
        self, page_id: str, external_user_id: str, page_token: Optional[str] = None
    ) -> Customer:
        """
        Return the Customer for (external_user_id, page_id), creating it on first contact.

        Profile fetch is best-effort. Raises StorageError when the store is unusable.
        """
        try:
            existing = self.get_by_external_id(external_user_id, page_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"customer lookup failed: {e}") from e
        if existing is not None:
            return existing

        profile = await self._profile(external_user_id, page_token)
        customer = Customer(
            external_user_id=external_user_id,
            page_id=page_id,
            name=profile.display_name,
            avatar=profile.avatar,
        )
        try:
            self.db.add(customer)
            self.db.commit()
        except IntegrityError:
            # Another request created the row first
            self.db.rollback()
            try:
                winner = self.get_by_external_id(external_user_id, page_id)
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StorageError(f"customer read-back failed: {e}") from e
            if winner is None:
                raise StorageError(
                    f"customer {external_user_id} on page {page_id} conflicted but is missing"
                )
            return winner
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"customer insert failed: {e}") from e
        self.db.refresh(customer)
        logger.info("Created customer %s for page %s", customer.id, page_id)
        return customer

    @staticmethod
    def synthetic(page_id: str, external_user_id: str) -> Customer:
        """Unpersisted stand-in used when the store is down; id is None."""
        return Customer(
            id=None,
            external_user_id=external_user_id,
            page_id=page_id,
            name=placeholder_name(external_user_id),
        )
