"""Document inputs for the data APIs."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# =============================================================================
# Single vs Batch
# =============================================================================


class SingleDocument(BaseModel):
    """One document to insert or update.

    The document may be a mapping, a pydantic model, a dataclass or any
    record-like object; it is serialized by field name.
    """

    document: Any


class DocumentBatch(BaseModel):
    """Several documents sent in one call."""

    documents: list[Any] = Field(min_length=1)


DocumentInput = SingleDocument | DocumentBatch


def document_list(documents: DocumentInput) -> list[Any]:
    """Return the documents to send, always as a list."""
    if isinstance(documents, DocumentBatch):
        return list(documents.documents)
    return [documents.document]


# =============================================================================
# Aggregation
# =============================================================================


class AggregationCommandType(str, Enum):
    PROJECT = "$project"
    UNWIND = "$unwind"
    GROUP = "$group"
    MATCH = "$match"


class AggregationCommand(BaseModel):
    """One stage of an aggregation pipeline run over a collection."""

    command: AggregationCommandType
    conditions: Any

    def serialize(self) -> dict[str, Any]:
        return {self.command.value: self.conditions}
