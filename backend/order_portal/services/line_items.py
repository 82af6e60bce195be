"""
Line item decoding for the itemsJson form field

Policy: a malformed itemsJson never rejects a submission. Whatever cannot be
parsed as a JSON array decodes to zero line items, and the reason is kept on
the result so the caller can log it. Browsers and older form builds have sent
odd payloads here; the order and its PDF still need to reach production.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from order_portal.schemas.submission import LineItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineItemDecodeResult:
    items: List[LineItem] = field(default_factory=list)
    error: Optional[str] = None  # Why decoding fell back to an empty list

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_line_items(items_json: str) -> LineItemDecodeResult:
    """
    Decode the JSON array of line items posted by the intake form.

    Array elements that are not objects become empty rows, so row count and
    order match what the salesperson entered.
    """
    try:
        payload = json.loads(items_json or "[]")
    except (TypeError, ValueError) as e:
        return LineItemDecodeResult(error=f"itemsJson is not valid JSON: {e}")

    if not isinstance(payload, list):
        return LineItemDecodeResult(error=f"itemsJson is a JSON {type(payload).__name__}, expected an array")

    items = []
    for index, raw in enumerate(payload):
        if not isinstance(raw, dict):
            logger.debug(f"Line item {index} is not an object, rendering an empty row")
            items.append(LineItem())
            continue
        items.append(LineItem.model_validate(raw))

    return LineItemDecodeResult(items=items)
