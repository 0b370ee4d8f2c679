from app.models.conversation_thread import ConversationThread
from app.models.customer import Customer
from app.models.label import CustomerLabel, Label
from app.models.message_ledger import MessageLedgerEntry
from app.models.message_mapping import MessageMapping
from app.models.pending_reply import PendingReply
from app.models.quick_reply import QuickReply

__all__ = [
    "ConversationThread",
    "Customer",
    "CustomerLabel",
    "Label",
    "MessageLedgerEntry",
    "MessageMapping",
    "PendingReply",
    "QuickReply",
]
