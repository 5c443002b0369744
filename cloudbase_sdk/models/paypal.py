"""PayPal express checkout bills."""

from typing import Any

from pydantic import BaseModel, Field


class PayPalBillItem(BaseModel):
    """A line of a PayPal bill."""

    name: str
    description: str = ""
    amount: float
    tax: float = 0.0
    quantity: int = Field(default=1, ge=1)

    def serialize(self) -> dict[str, Any]:
        return {
            "item_name": self.name,
            "item_description": self.description,
            "item_amount": self.amount,
            "item_tax": self.tax,
            "item_quantity": self.quantity,
        }


class PayPalBill(BaseModel):
    """A purchase prepared through cloudbase.io for PayPal checkout.

    Required fields:
        name: Bill name shown on PayPal
        currency: ISO currency code
        items: At least one line item

    Optional fields:
        payment_completed_function: Cloud function to run once paid
        payment_cancelled_function: Cloud function to run on cancellation
        payment_completed_url: Page to redirect to once paid
        payment_cancelled_url: Page to redirect to on cancellation
    """

    name: str
    description: str = ""
    invoice_number: str = ""
    currency: str = "USD"
    items: list[PayPalBillItem] = Field(min_length=1)
    payment_completed_function: str | None = None
    payment_cancelled_function: str | None = None
    payment_completed_url: str | None = None
    payment_cancelled_url: str | None = None

    @property
    def amount(self) -> float:
        return sum((item.amount + item.tax) * item.quantity for item in self.items)

    def serialize_purchase(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "invoice_number": self.invoice_number,
            "amount": self.amount,
            "items": [item.serialize() for item in self.items],
        }
