"""Default labels and quick replies seeded into a fresh database."""

from enum import StrEnum


class HistoryRange(StrEnum):
    """Time ranges offered by the history menu."""

    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"
    ALL = "all"


HISTORY_RANGE_HOURS = {
    HistoryRange.LAST_24H: 24,
    HistoryRange.LAST_7D: 24 * 7,
    HistoryRange.LAST_30D: 24 * 30,
    HistoryRange.ALL: None,
}

HISTORY_RANGE_TITLES = {
    HistoryRange.LAST_24H: "24 giờ",
    HistoryRange.LAST_7D: "7 ngày",
    HistoryRange.LAST_30D: "30 ngày",
    HistoryRange.ALL: "Tất cả",
}

DEFAULT_LABEL_EMOJI = "🏷️"

DEFAULT_LABELS = [
    {"name": "vip", "emoji": "⭐", "color": "#FFD700"},
    {"name": "khieu-nai", "emoji": "😠", "color": "#FF4444"},
    {"name": "don-hang", "emoji": "📦", "color": "#FF8800"},
    {"name": "tu-van", "emoji": "💬", "color": "#00AA00"},
    {"name": "gap", "emoji": "🚨", "color": "#FF0000"},
    {"name": "moi", "emoji": "🟢", "color": "#00CC00"},
    {"name": "khach-quen", "emoji": "💙", "color": "#0088FF"},
]

DEFAULT_QUICK_REPLIES = [
    {
        "key": "chao",
        "emoji": "👋",
        "text_vi": "Xin chào! Shop có thể giúp gì cho bạn?",
        "text_en": "Hello! How can I help you?",
    },
    {
        "key": "camOn",
        "emoji": "🙏",
        "text_vi": "Cảm ơn bạn đã liên hệ! Chúc bạn một ngày tốt lành!",
        "text_en": "Thank you for contacting us! Have a nice day!",
    },
    {
        "key": "doiChut",
        "emoji": "⏳",
        "text_vi": "Vui lòng đợi một chút, shop đang kiểm tra thông tin cho bạn.",
        "text_en": "Please wait a moment, we are checking the information for you.",
    },
    {
        "key": "conHang",
        "emoji": "✅",
        "text_vi": "Sản phẩm này hiện đang còn hàng ạ!",
        "text_en": "This product is currently in stock!",
    },
    {
        "key": "hetHang",
        "emoji": "❌",
        "text_vi": "Rất tiếc, sản phẩm này hiện đang hết hàng.",
        "text_en": "Sorry, this product is currently out of stock.",
    },
    {
        "key": "gia",
        "emoji": "💰",
        "text_vi": "Để biết giá chính xác, bạn vui lòng cho shop biết sản phẩm cụ thể nhé!",
        "text_en": "For exact pricing, please let us know which specific product you are interested in!",
    },
    {
        "key": "ship",
        "emoji": "🚚",
        "text_vi": "Shop giao hàng toàn quốc. Phí ship từ 15-30k tùy khu vực.",
        "text_en": "We ship nationwide. Shipping fee from 15-30k depending on the area.",
    },
]
