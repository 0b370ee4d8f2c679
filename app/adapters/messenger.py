"""
Facebook Messenger platform adapter (customer channel).

Parses page webhooks and calls the Graph API with the page access token of the
page the customer wrote to.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError

from app.adapters.base import BasePlatformAdapter
from app.config import PageConfig
from app.exceptions import TransportError
from app.schemas.messenger import MessengerWebhook
from app.schemas.relay import (
    Attachment,
    Channel,
    CustomerProfile,
    InboundMessage,
    MessageMetadata,
    OutboundMessage,
    OutboundSendResult,
)

logger = logging.getLogger(__name__)

PAGE_OBJECT = "page"
SUBSCRIBE_MODE = "subscribe"


def placeholder_name(external_user_id: str) -> str:
    """Name shown for customers whose profile cannot be fetched."""
    return f"Khách #{(external_user_id or '')[-6:]}"


class MessengerAdapter(BasePlatformAdapter):
    """Messenger adapter: parse page webhooks, fetch profiles, send via Send API."""

    def __init__(
        self,
        pages: Mapping[str, PageConfig],
        graph_api_url: str = "https://graph.facebook.com",
        api_version: str = "v19.0",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 20.0,
    ) -> None:
        self._pages = dict(pages)
        self._base_url = f"{graph_api_url.rstrip('/')}/{api_version}"
        self._client = client
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def verify_subscription(
        mode: Optional[str],
        token: Optional[str],
        challenge: Optional[str],
        expected_token: Optional[str],
    ) -> Optional[str]:
        """Return the challenge to echo back when the handshake is valid, else None."""
        if mode == SUBSCRIBE_MODE and expected_token and token == expected_token:
            return challenge or ""
        return None

    def parse_webhook(self, raw_payload: dict[str, Any]) -> list[InboundMessage]:
        """
        Parse a page webhook into inbound customer messages.

        Echoes of the page's own messages and non-message events (reads,
        deliveries, postbacks) are dropped.
        """
        try:
            body = MessengerWebhook.model_validate(raw_payload)
        except ValidationError as e:
            raise ValueError(f"Invalid Messenger webhook: {e}") from e
        if body.object != PAGE_OBJECT:
            raise ValueError(f"Unsupported webhook object: {body.object}")

        messages: list[InboundMessage] = []
        for entry in body.entry:
            for event in entry.messaging:
                msg = event.message
                if msg is None or msg.is_echo:
                    continue
                attachments = [
                    Attachment(kind=a.type, url=a.payload.url if a.payload else None)
                    for a in msg.attachments
                ]
                if not msg.text and not attachments:
                    continue
                ts = (
                    datetime.fromtimestamp(event.timestamp / 1000, tz=timezone.utc)
                    if event.timestamp
                    else datetime.now(timezone.utc)
                )
                messages.append(
                    InboundMessage(
                        channel=Channel.MESSENGER,
                        page_id=entry.id,
                        external_user_id=event.sender.id,
                        message_id=msg.mid or "",
                        text=msg.text or "",
                        attachments=attachments,
                        metadata=MessageMetadata(timestamp=ts),
                    )
                )
        return messages

    async def fetch_profile(self, external_user_id: str, token: str) -> CustomerProfile:
        """Fetch the sender's public name; raise TransportError on any failure."""
        try:
            resp = await self._get_client().get(
                f"{self._base_url}/{external_user_id}",
                params={"fields": "first_name,last_name,profile_pic", "access_token": token},
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(f"profile lookup failed: {e}") from e
        name = f"{data.get('first_name') or ''} {data.get('last_name') or ''}".strip()
        return CustomerProfile(
            display_name=name or placeholder_name(external_user_id),
            avatar=data.get("profile_pic"),
        )

    async def _post_message(self, token: str, payload: dict[str, Any]) -> str:
        try:
            resp = await self._get_client().post(
                f"{self._base_url}/me/messages",
                params={"access_token": token},
                json=payload,
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(f"Send API request failed: {e}") from e
        message_id = data.get("message_id")
        if not message_id:
            raise TransportError(f"Send API returned no message_id: {data}")
        return str(message_id)

    async def send_text(self, external_user_id: str, token: str, text: str) -> str:
        """Send a text message; returns the delivery receipt (message id)."""
        return await self._post_message(
            token,
            {
                "recipient": {"id": external_user_id},
                "messaging_type": "RESPONSE",
                "message": {"text": text},
            },
        )

    async def send_media(
        self, external_user_id: str, token: str, attachment: Attachment
    ) -> str:
        """Send a media attachment by URL; returns the delivery receipt (message id)."""
        if not attachment.url:
            raise TransportError("attachment has no url")
        return await self._post_message(
            token,
            {
                "recipient": {"id": external_user_id},
                "messaging_type": "RESPONSE",
                "message": {
                    "attachment": {
                        "type": attachment.kind,
                        "payload": {"url": attachment.url, "is_reusable": True},
                    }
                },
            },
        )

    async def send(self, outbound: OutboundMessage) -> OutboundSendResult:
        """Send via the page named in outbound.page_id. external_user_id = PSID."""
        if outbound.channel != Channel.MESSENGER:
            return OutboundSendResult(success=False, platform_message_id=None)
        page = self._pages.get(outbound.page_id or "")
        if page is None:
            return OutboundSendResult(success=False, platform_message_id=None)
        if not outbound.text.strip() and not outbound.attachments:
            return OutboundSendResult(success=False, platform_message_id=None)
        message_id: Optional[str] = None
        try:
            # Graph rejects empty text, so media-only messages skip the text send
            if outbound.text.strip():
                message_id = await self.send_text(
                    outbound.external_user_id, page.token, outbound.text
                )
            for attachment in outbound.attachments:
                media_id = await self.send_media(
                    outbound.external_user_id, page.token, attachment
                )
                message_id = message_id or media_id
        except TransportError as e:
            logger.warning("Messenger send failed for page %s: %s", page.id, e)
            return OutboundSendResult(success=False, platform_message_id=None)
        return OutboundSendResult(success=True, platform_message_id=message_id)
