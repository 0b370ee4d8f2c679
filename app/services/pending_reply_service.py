"""
Outbound confirmation workflow.

An operator reply is translated and staged under a single-use confirmation
token. Confirming delivers the translation to the customer and removes the
staged row; cancelling removes it without sending.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import PageConfig
from app.exceptions import NotFoundError, StorageError, TransportError
from app.models.message_ledger import SENDER_OPERATOR
from app.models.pending_reply import PENDING_STATUS, SENDING_STATUS, PendingReply
from app.schemas.relay import StagedReply
from app.services.ledger_service import LedgerService
from app.services.translation_service import TranslationService

logger = logging.getLogger(__name__)

# (external_user_id, page_token, text) -> delivery receipt; raises TransportError
TextSender = Callable[[str, str, str], Awaitable[str]]


def make_confirm_token(external_user_id: str, now_ns: Optional[int] = None) -> str:
    """Hex microsecond timestamp joined to the recipient id with '-'."""
    micros = (now_ns if now_ns is not None else time.time_ns()) // 1000
    return f"{micros:x}-{external_user_id}"


class PendingReplyService:
    def __init__(
        self,
        db: Session,
        translation: TranslationService,
        send_text: TextSender,
        pages: Mapping[str, PageConfig],
        ledger: Optional[LedgerService] = None,
    ) -> None:
        self.db = db
        self._translation = translation
        self._send_text = send_text
        self._pages = pages
        self._ledger = ledger or LedgerService(db)

    def get_pending(self, token: str) -> PendingReply:
        try:
            row = (
                self.db.query(PendingReply)
                .filter(PendingReply.confirm_token == token)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"pending reply lookup failed: {e}") from e
        if row is None:
            raise NotFoundError(f"no pending reply for token {token}")
        return row

    async def stage(
        self,
        page_id: str,
        external_user_id: str,
        original_text: str,
        customer_id: Optional[int] = None,
    ) -> StagedReply:
        """Translate the operator's text for the customer and persist it as pending."""
        translated = await self._translation.to_customer(original_text)
        token = make_confirm_token(external_user_id)
        row = PendingReply(
            confirm_token=token,
            page_id=page_id,
            external_user_id=external_user_id,
            customer_id=customer_id,
            original_text=original_text,
            translated_text=translated,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"staging reply failed: {e}") from e
        return StagedReply(
            token=token, original_text=original_text, translated_text=translated
        )

    def _set_status(self, token: str, current: str, new: str) -> bool:
        """Conditionally move a row between states; True when this call won."""
        try:
            updated = (
                self.db.query(PendingReply)
                .filter(
                    PendingReply.confirm_token == token,
                    PendingReply.status == current,
                )
                .update({PendingReply.status: new}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"updating pending reply failed: {e}") from e
        return updated == 1

    async def confirm(self, token: str) -> StagedReply:
        """
        Send the staged translation and consume the token.

        The row is claimed before sending, so overlapping confirms of the same
        token deliver once; the loser gets NotFoundError like an unknown or
        cancelled token. On a TransportError the row is released so the
        operator can retry.
        """
        row = self.get_pending(token)
        page = self._pages.get(row.page_id)
        if page is None:
            raise TransportError(f"page {row.page_id} is not configured")

        staged = StagedReply(
            token=row.confirm_token,
            original_text=row.original_text,
            translated_text=row.translated_text,
        )
        external_user_id = row.external_user_id
        customer_id = row.customer_id

        if not self._set_status(token, PENDING_STATUS, SENDING_STATUS):
            raise NotFoundError(f"no pending reply for token {token}")

        try:
            await self._send_text(external_user_id, page.token, staged.translated_text)
        except TransportError:
            try:
                self._set_status(token, SENDING_STATUS, PENDING_STATUS)
            except StorageError as e:
                logger.error("Reply %s could not be released for retry: %s", token, e)
            raise

        try:
            if customer_id is not None:
                self.db.add(
                    self._ledger.build_entry(
                        customer_id=customer_id,
                        sender_role=SENDER_OPERATOR,
                        text=staged.original_text,
                        translated_text=staged.translated_text,
                    )
                )
            self.db.query(PendingReply).filter(
                PendingReply.confirm_token == token
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Reply %s was delivered but not recorded: %s", token, e)
            raise StorageError(f"recording sent reply failed: {e}") from e
        return staged

    def cancel(self, token: str) -> None:
        """Discard a staged reply; unknown or consumed tokens are fine."""
        try:
            self.db.query(PendingReply).filter(
                PendingReply.confirm_token == token
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"cancelling reply failed: {e}") from e
