from order_portal.schemas.submission import LineItem, LINE_ITEM_COLUMNS, OrderForm, OrderAttachment, Submission
from order_portal.schemas.email import EmailAttachment, EmailRequest, EmailAck

__all__ = [
    "LineItem",
    "LINE_ITEM_COLUMNS",
    "OrderForm",
    "OrderAttachment",
    "Submission",
    "EmailAttachment",
    "EmailRequest",
    "EmailAck",
]
