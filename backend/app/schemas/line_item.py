"""Structured invoice line items.

Line items are persisted as a JSON array; this schema is the boundary that
validates them on the way in and out.
"""

import json
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class LineItem(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(Decimal("1"), gt=0)
    unit_price: Decimal = Field(..., ge=0)
    line_total: Optional[Decimal] = None

    @model_validator(mode="after")
    def fill_line_total(self) -> "LineItem":
        if self.line_total is None:
            self.line_total = (self.quantity * self.unit_price).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return self


def dump_line_items(items: list[LineItem] | None) -> list[dict[str, Any]]:
    """Serialize line items into JSON-safe dicts for the JSON column."""
    return [item.model_dump(mode="json") for item in items or []]


def load_line_items(raw: Any) -> list[LineItem]:
    """Validate a persisted JSON array (or its encoded string) back into ``LineItem`` objects."""
    if isinstance(raw, str):
        raw = json.loads(raw or "[]")
    if not raw:
        return []
    return [LineItem.model_validate(item) for item in raw]
