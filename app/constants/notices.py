class OperatorNotices:
    """Operator-facing strings shown in the Telegram group (operators read Vietnamese)."""

    CUSTOMER_NOT_FOUND = "❌ Không tìm thấy thông tin khách hàng"
    PAGE_NOT_CONFIGURED = "❌ Không tìm thấy cấu hình fanpage"
    EXPIRED = "❌ Tin nhắn đã hết hạn"
    NOT_FOUND = "❌ Không tìm thấy dữ liệu"
    SEND_FAILED = "❌ Lỗi gửi tin nhắn"
    STORAGE_FAILED = "❌ Lỗi lưu dữ liệu"
    GENERIC_FAILURE = "❌ Có lỗi xảy ra, vui lòng thử lại"
    SENT = "✅ Đã gửi!"
    CANCELLED = "Đã hủy"
    CANCELLED_BODY = "❌ Đã hủy"
    DONE = "✅ Đã xử lý"
    DONE_BY = "✅ Đã xử lý bởi {name}"
    QUICK_REPLY_MENU = "⚡ <b>Chọn câu trả lời nhanh:</b>"
    NO_QUICK_REPLIES = "Chưa có câu trả lời nhanh nào"
    HISTORY_MENU = "📋 <b>Xem lịch sử tin nhắn:</b>"
    HISTORY_EMPTY = "📭 Không có tin nhắn nào trong khoảng thời gian này"
    HISTORY_OMITTED = "… {count} tin nhắn cũ hơn đã được ẩn"
    LABEL_HINT = "Gõ /label {customer_id} <tên nhãn>. Nhãn: {labels}"
    LABEL_ADDED = "🏷️ Đã gắn nhãn {label} cho khách #{customer_id}"
    LABEL_REMOVED = "🏷️ Đã gỡ nhãn {label} khỏi khách #{customer_id}"
    LABEL_USAGE = "Cú pháp: /{command} <customer_id> <tên nhãn>"
    LABEL_UNKNOWN = "❌ Không có nhãn {label}"
    CLOSE = "✖️ Đóng"

    # Button labels
    BTN_QUICK_REPLY = "⚡ Trả lời nhanh"
    BTN_ADD_LABEL = "🏷️ Thêm nhãn"
    BTN_HISTORY = "📋 Lịch sử"
    BTN_DONE = "✅ Đã xử lý"
    BTN_SEND = "✅ Gửi luôn"
    BTN_CANCEL = "❌ Hủy"
