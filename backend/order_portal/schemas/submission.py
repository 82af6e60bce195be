"""
Submission schemas: order form fields, line items and the PO attachment
"""
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, field_validator


def to_wire_name(field_name: str) -> str:
    """Multipart / JSON key for a field: product_number -> productNumber, x2l -> x2l"""
    head, *rest = field_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class LineItem(BaseModel):
    """One row of product/size/decoration detail. Every field is free text."""
    product_number: str = ""
    item_number: str = ""
    vendor: str = ""
    style_name: str = ""
    color: str = ""
    os: str = ""
    xs: str = ""
    s: str = ""
    m: str = ""
    l: str = ""
    xl: str = ""
    x2l: str = ""
    x3l: str = ""
    total: str = ""
    decoration_front: str = ""
    decoration_back: str = ""
    decoration_other: str = ""
    label: str = ""
    retail_finish: str = ""
    variant: str = ""
    production_note: str = ""
    drawstrings: str = ""

    class Config:
        alias_generator = to_wire_name
        populate_by_name = True

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None or value is False or value == "":
            return ""
        if value is True:
            return "true"
        return str(value)


# (field name, column label) in email table order
LINE_ITEM_COLUMNS = [
    ("product_number", "Product #"),
    ("item_number", "Item #"),
    ("vendor", "Vendor"),
    ("style_name", "Style name"),
    ("color", "Color"),
    ("os", "OS"),
    ("xs", "XS"),
    ("s", "S"),
    ("m", "M"),
    ("l", "L"),
    ("xl", "XL"),
    ("x2l", "2XL"),
    ("x3l", "3XL"),
    ("total", "Total"),
    ("decoration_front", "Deco Front"),
    ("decoration_back", "Deco Back"),
    ("decoration_other", "Deco Other"),
    ("label", "Label"),
    ("retail_finish", "Retail Finish"),
    ("variant", "Variant"),
    ("production_note", "Production Note"),
    ("drawstrings", "Drawstrings"),
]


class OrderForm(BaseModel):
    """Text fields of a submission, exactly as posted (absent fields are empty)."""
    salesperson_name: str = ""
    salesperson_email: str = ""
    access_code: str = ""

    po_number: str = ""
    po_name: str = ""
    rush_order: str = "false"
    submit_date: str = ""
    ship_date: str = ""
    status: str = ""

    client_first_name: str = ""
    client_last_name: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    phone: str = ""

    notes: str = ""
    items_json: str = "[]"

    class Config:
        alias_generator = to_wire_name
        populate_by_name = True

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "OrderForm":
        """Read every text field from multipart form data; non-text values count as absent."""
        values = {}
        for name, field in cls.model_fields.items():
            value = form.get(field.alias)
            if isinstance(value, str) and value:
                values[name] = value
        return cls(**values)

    @property
    def is_rush(self) -> bool:
        return self.rush_order == "true"

    @property
    def client_name(self) -> str:
        return f"{self.client_first_name} {self.client_last_name}".strip()


class OrderAttachment(BaseModel):
    """The uploaded PO PDF.

    `content` holds at most max_pdf_bytes + 1 bytes; `declared_size` is the
    upload's full size, so an oversized file is rejected without buffering it.
    """
    filename: Optional[str] = None
    content_type: Optional[str] = None
    content: bytes
    declared_size: Optional[int] = None

    @property
    def size(self) -> int:
        return max(len(self.content), self.declared_size or 0)


class Submission(BaseModel):
    """A validated order, used once to build the production email"""
    form: OrderForm
    line_items: List[LineItem] = []
    attachment: OrderAttachment
