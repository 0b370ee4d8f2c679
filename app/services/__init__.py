from app.services.customer_service import CustomerService
from app.services.label_service import LabelService
from app.services.ledger_service import LedgerService
from app.services.observer_hub import ObserverHub
from app.services.pending_reply_service import PendingReplyService
from app.services.quick_reply_service import QuickReplyService
from app.services.thread_service import ThreadService
from app.services.translation_cache import TranslationCache
from app.services.translation_service import TranslationService

__all__ = [
    "CustomerService",
    "LabelService",
    "LedgerService",
    "ObserverHub",
    "PendingReplyService",
    "QuickReplyService",
    "ThreadService",
    "TranslationCache",
    "TranslationService",
]
