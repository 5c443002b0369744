"""Public models for the cloudbase.io APIs."""

from cloudbase_sdk.models.documents import (
    AggregationCommand,
    AggregationCommandType,
    DocumentBatch,
    DocumentInput,
    SingleDocument,
    document_list,
)
from cloudbase_sdk.models.enums import LogLevel, NotificationType
from cloudbase_sdk.models.paypal import PayPalBill, PayPalBillItem

__all__ = [
    "AggregationCommand",
    "AggregationCommandType",
    "DocumentBatch",
    "DocumentInput",
    "SingleDocument",
    "document_list",
    "LogLevel",
    "NotificationType",
    "PayPalBill",
    "PayPalBillItem",
]
