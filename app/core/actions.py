"""
Action tokens carried in inline-button callback data.

Format: ``<kind>_<arg1>_<arg2>...``. The kind is the text before the first
underscore; arguments never contain underscores. Decoding never raises:
anything unrecognised or with the wrong number of arguments becomes NOOP.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Tuple

SEPARATOR = "_"
# Telegram rejects callback_data longer than 64 bytes
MAX_TOKEN_BYTES = 64


class ActionKind(StrEnum):
    SEND = "send"
    CANCEL = "cancel"
    QUICK_REPLY = "quickreply"
    SEND_QUICK_REPLY = "sendqr"
    ADD_LABEL = "addlabel"
    HISTORY = "history"
    HISTORY_FILTER = "historyfilter"
    DONE = "done"
    CLOSE = "close"
    NOOP = "noop"


ARITY = {
    ActionKind.SEND: 1,  # confirm token
    ActionKind.CANCEL: 1,  # confirm token
    ActionKind.QUICK_REPLY: 3,  # page_id, external_user_id, language
    ActionKind.SEND_QUICK_REPLY: 4,  # quick_reply_id, page_id, external_user_id, language
    ActionKind.ADD_LABEL: 1,  # customer_id
    ActionKind.HISTORY: 1,  # customer_id
    ActionKind.HISTORY_FILTER: 2,  # customer_id, range
    ActionKind.DONE: 1,  # customer_id
    ActionKind.CLOSE: 0,
    ActionKind.NOOP: 0,
}


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    args: Tuple[str, ...] = field(default_factory=tuple)

    def arg(self, index: int) -> str:
        return self.args[index]


NOOP = Action(ActionKind.NOOP)


def decode_action(token: Optional[str]) -> Action:
    if not token:
        return NOOP
    name, *args = token.split(SEPARATOR)
    try:
        kind = ActionKind(name)
    except ValueError:
        return NOOP
    if len(args) != ARITY[kind] or any(a == "" for a in args):
        return NOOP
    return Action(kind, tuple(args))


def encode_action(kind: ActionKind, *args: object) -> str:
    """Build a token; raises ValueError on bad arity, underscores in args, or oversize."""
    parts = [str(a) for a in args]
    if len(parts) != ARITY[kind]:
        raise ValueError(f"{kind} takes {ARITY[kind]} argument(s), got {len(parts)}")
    for part in parts:
        if not part or SEPARATOR in part:
            raise ValueError(f"invalid action argument: {part!r}")
    token = SEPARATOR.join([kind.value, *parts])
    if len(token.encode("utf-8")) > MAX_TOKEN_BYTES:
        raise ValueError(f"action token exceeds {MAX_TOKEN_BYTES} bytes: {token}")
    return token
