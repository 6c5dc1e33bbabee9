"""
Domain models for the discount engine.

A Record is one transaction line: the fields read from input plus the two
computed fields (`discount`, `final_price`) that stay at 0.0 until the record
has been through the evaluator.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    A single retail transaction.

    Records are frozen; pricing produces a new instance via `with_pricing`.
    """

    timestamp: str = Field(..., description="ISO-8601 date-time of the sale.")
    product_name: str = Field(..., description='Product, by convention "<Category> - <variant>".')
    expiry_date: str = Field(..., description="Product expiry date, yyyy-MM-dd.")
    quantity: int = Field(..., description="Units sold.")
    unit_price: float = Field(..., description="Price of a single unit.")
    channel: str = Field(..., description="Sales channel, e.g. Store or App.")
    payment_method: str = Field(..., description="Payment method, e.g. Visa or Cash.")
    discount: float = Field(0.0, description="Effective discount percentage.")
    final_price: float = Field(0.0, description="Total price after discount.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    @property
    def gross_price(self) -> float:
        """Undiscounted total, unit price times quantity."""
        return self.unit_price * self.quantity

    def with_pricing(self, discount: float, final_price: float) -> "Record":
        return self.model_copy(update={"discount": discount, "final_price": final_price})


__all__ = ["Record"]
