"""
Operator-group message bodies (Telegram HTML) and their inline controls.

All customer-supplied text is HTML-escaped before it is embedded.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from html import escape
from typing import Iterable, List, Optional, Sequence

from app.constants.catalog import (
    DEFAULT_LABEL_EMOJI,
    HISTORY_RANGE_TITLES,
    HistoryRange,
)
from app.constants.notices import OperatorNotices
from app.core.actions import ActionKind, encode_action
from app.models.customer import Customer
from app.models.label import Label
from app.models.message_ledger import SENDER_CUSTOMER, MessageLedgerEntry
from app.models.quick_reply import QuickReply
from app.schemas.relay import Attachment, InboundTranslation, StagedReply
from app.services.thread_service import AnchorInfo
from app.utils.clock import ensure_utc

# Telegram caps message text at 4096 characters
TELEGRAM_MESSAGE_LIMIT = 4096
HISTORY_BUDGET = 3500
HISTORY_ENTRY_MAX_CHARS = 600

DISPLAY_TZ = timezone(timedelta(hours=7), "ICT")
RULE = "<b>━━━━━━━━━━━━━━━━━━━━</b>"

_MEDIA_TITLES = {
    "image": "🖼️ Ảnh",
    "video": "🎬 Video",
    "audio": "🎵 Âm thanh",
    "file": "📎 Tệp",
}


def format_time(value: datetime, fmt: str = "%H:%M:%S %d/%m/%Y") -> str:
    return ensure_utc(value).astimezone(DISPLAY_TZ).strftime(fmt)


def describe_attachment(attachment: Attachment) -> str:
    title = _MEDIA_TITLES.get(attachment.kind, f"📎 {attachment.kind}")
    if attachment.url:
        return f"[{title}] {attachment.url}"
    return f"[{title}]"


def format_labels(labels: Iterable[Label]) -> str:
    return " ".join(
        f"{label.emoji or DEFAULT_LABEL_EMOJI}{escape(label.name)}" for label in labels
    )


def format_inbound(
    page_name: str,
    customer: Customer,
    labels: Sequence[Label],
    translation: InboundTranslation,
    original_text: str,
    now: datetime,
    anchor: Optional[AnchorInfo] = None,
    attachments: Sequence[Attachment] = (),
) -> str:
    """
    Body of a relayed customer message.

    The translation and the original are clipped so the whole body stays under
    the Telegram message limit.
    """
    language = translation.source_language.upper()
    head = [
        RULE,
        f"<b>🏪 {escape(page_name)}</b> {format_labels(labels)}".rstrip(),
        RULE,
        "",
        f"👤 <b>{escape(customer.name or '')}</b> (#{escape(customer.short_id)})",
        f"🌐 <b>Ngôn ngữ:</b> {escape(language)}",
        f"🕐 <b>Thời gian:</b> {format_time(now)}",
    ]
    if anchor is not None:
        head.append(f"🔗 <b>Thread cũ:</b> {anchor.age_hours}h trước")
    head += ["", RULE]
    tail = [escape(describe_attachment(a)) for a in attachments] + [RULE]

    if not original_text:
        return "\n".join(head + tail)

    def text_block(translated: str, original: str) -> str:
        if translation.translated:
            return (
                f"💬 <b>Bản dịch (VI):</b>\n<i>{translated}</i>\n\n"
                f"📝 <b>Tin gốc ({escape(language)}):</b>\n<code>{original}</code>"
            )
        return f"💬 <b>Tin nhắn:</b>\n<i>{original}</i>"

    skeleton = "\n".join(head + [text_block("", "")] + tail)
    translated, original = _fit_pair(
        translation.text if translation.translated else "",
        original_text,
        TELEGRAM_MESSAGE_LIMIT - len(skeleton),
    )
    return "\n".join(head + [text_block(translated, original)] + tail)


def inbound_controls(
    page_id: str, external_user_id: str, language: str, customer_id: Optional[int]
) -> List[List[tuple[str, str]]]:
    rows = [
        [
            (
                OperatorNotices.BTN_QUICK_REPLY,
                encode_action(ActionKind.QUICK_REPLY, page_id, external_user_id, language),
            )
        ]
    ]
    # Unpersisted customers have no id to attach labels or history to
    if customer_id is not None:
        rows[0].append(
            (OperatorNotices.BTN_ADD_LABEL, encode_action(ActionKind.ADD_LABEL, customer_id))
        )
        rows.append(
            [
                (OperatorNotices.BTN_HISTORY, encode_action(ActionKind.HISTORY, customer_id)),
                (OperatorNotices.BTN_DONE, encode_action(ActionKind.DONE, customer_id)),
            ]
        )
    return rows


def escape_clipped(text: str, limit: int) -> str:
    """HTML-escape `text`, cutting it so the escaped result fits in `limit` characters."""
    escaped = escape(text)
    if len(escaped) <= limit:
        return escaped
    pieces: List[str] = []
    used = 0
    for char in text:
        piece = escape(char)
        if used + len(piece) > limit - 1:
            break
        pieces.append(piece)
        used += len(piece)
    return "".join(pieces) + "…"


def _fit_pair(first: str, second: str, room: int) -> tuple[str, str]:
    """Escape two texts into `room` characters; a short one cedes its share to the other."""
    room = max(room, 2)
    half = room // 2
    first_len = len(escape(first))
    second_len = len(escape(second))
    first_limit = max(half, room - second_len)
    second_limit = room - min(first_len, first_limit)
    return escape_clipped(first, first_limit), escape_clipped(second, second_limit)


def format_confirmation(staged: StagedReply) -> str:
    def body(original: str, translated: str) -> str:
        return (
            "📝 <b>Xác nhận bản dịch:</b>\n\n"
            f"🇻🇳 Tin gốc: \"{original}\"\n"
            f"🇬🇧 Bản dịch: \"{translated}\""
        )

    original, translated = _fit_pair(
        staged.original_text,
        staged.translated_text,
        TELEGRAM_MESSAGE_LIMIT - len(body("", "")),
    )
    return body(original, translated)


def confirmation_controls(token: str) -> List[List[tuple[str, str]]]:
    return [
        [
            (OperatorNotices.BTN_SEND, encode_action(ActionKind.SEND, token)),
            (OperatorNotices.BTN_CANCEL, encode_action(ActionKind.CANCEL, token)),
        ]
    ]


def format_sent(staged: StagedReply) -> str:
    return f"✅ <b>Đã gửi!</b>\n\n🇬🇧 \"{escape(staged.translated_text)}\""


def quick_reply_controls(
    quick_replies: Sequence[QuickReply],
    page_id: str,
    external_user_id: str,
    language: str,
) -> List[List[tuple[str, str]]]:
    rows = [
        [
            (
                f"{qr.emoji or ''} {qr.text_for(language)}".strip()[:60],
                encode_action(
                    ActionKind.SEND_QUICK_REPLY, qr.id, page_id, external_user_id, language
                ),
            )
        ]
        for qr in quick_replies
    ]
    rows.append([(OperatorNotices.CLOSE, encode_action(ActionKind.CLOSE))])
    return rows


def history_menu_controls(customer_id: int) -> List[List[tuple[str, str]]]:
    buttons = [
        (HISTORY_RANGE_TITLES[r], encode_action(ActionKind.HISTORY_FILTER, customer_id, r.value))
        for r in HistoryRange
    ]
    return [
        buttons[:2],
        buttons[2:],
        [(OperatorNotices.CLOSE, encode_action(ActionKind.CLOSE))],
    ]


def done_controls(sender_name: Optional[str] = None) -> List[List[tuple[str, str]]]:
    label = (
        OperatorNotices.DONE_BY.format(name=sender_name)
        if sender_name
        else OperatorNotices.DONE
    )
    return [[(label, encode_action(ActionKind.NOOP))]]


def _clip(text: str, limit: int = HISTORY_ENTRY_MAX_CHARS) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def format_history_entry(entry: MessageLedgerEntry) -> str:
    who = "👤 Khách" if entry.sender_role == SENDER_CUSTOMER else "💬 Shop"
    parts = [f"<b>[{format_time(entry.created_at, '%d/%m %H:%M')}] {who}:</b>"]
    if entry.text:
        parts.append(escape(_clip(entry.text)))
    if entry.media_kind:
        parts.append(
            escape(describe_attachment(Attachment(kind=entry.media_kind, url=entry.media_ref)))
        )
    line = " ".join(parts)
    if entry.translated_text and entry.translated_text != entry.text:
        line += f"\n<i>→ {escape(_clip(entry.translated_text))}</i>"
    return line


def render_history(
    customer: Customer,
    entries: Sequence[MessageLedgerEntry],
    history_range: HistoryRange,
    budget: int = HISTORY_BUDGET,
) -> str:
    """
    History view for one customer, oldest to newest.

    When the entries do not fit in `budget` characters the newest are kept and
    the oldest are replaced by a single "N older messages omitted" line.
    """
    header = (
        f"📋 <b>Lịch sử: {escape(customer.name or '')}</b> "
        f"(#{escape(customer.short_id)}) · {HISTORY_RANGE_TITLES[history_range]}"
    )
    if not entries:
        return f"{header}\n\n{OperatorNotices.HISTORY_EMPTY}"

    rendered = [format_history_entry(e) for e in entries]
    # room for the header and a worst-case omission line
    omission_reserve = (
        len(OperatorNotices.HISTORY_OMITTED.format(count=len(entries))) + len("<i></i>") + 2
    )
    remaining = budget - len(header) - 2 - omission_reserve
    kept: List[str] = []
    for line in reversed(rendered):
        cost = len(line) + 2
        if cost > remaining:
            break
        kept.append(line)
        remaining -= cost
    kept.reverse()

    omitted = len(rendered) - len(kept)
    blocks = [header]
    if omitted:
        blocks.append(f"<i>{OperatorNotices.HISTORY_OMITTED.format(count=omitted)}</i>")
    blocks.extend(kept)
    return "\n\n".join(blocks)
