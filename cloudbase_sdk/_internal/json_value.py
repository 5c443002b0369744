"""Weakly-typed JSON value model for schema-less server payloads.

Payloads returned by cloudbase.io have no fixed schema: "message" may be an
object, a list of documents, or a bare string or number. This module models
them as an explicit tagged union:

    JsonNull | JsonBool | JsonNumber | JsonString | JsonArray | JsonObject

Public functions:
    decode       - JSON text -> JsonValue (raises ParseError)
    encode       - JsonValue or native structured value -> canonical JSON text
    from_python  - native JSON data (dict/list/scalars) -> JsonValue
    to_native    - any supported value -> native JSON data
"""

import dataclasses
import json
import math
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt

from cloudbase_sdk.exceptions import CloudbaseValidationError, ParseError

# =============================================================================
# Variants
# =============================================================================


class JsonNull(BaseModel):
    """The JSON literal null."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["null"] = "null"

    def to_python(self) -> None:
        return None


class JsonBool(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bool"] = "bool"
    value: StrictBool

    def to_python(self) -> bool:
        return self.value


class JsonNumber(BaseModel):
    """A JSON number. Integers keep arbitrary precision."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: StrictInt | StrictFloat

    def to_python(self) -> int | float:
        return self.value


class JsonString(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str

    def to_python(self) -> str:
        return self.value


class JsonArray(BaseModel):
    """An ordered sequence of JSON values."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["array"] = "array"
    items: tuple["JsonValue", ...] = ()

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]

    def __len__(self) -> int:
        return len(self.items)


class JsonObject(BaseModel):
    """A mapping of string keys to JSON values. Key order is not significant."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    members: dict[str, "JsonValue"] = Field(default_factory=dict)

    def to_python(self) -> dict[str, Any]:
        return {key: value.to_python() for key, value in self.members.items()}

    def get(self, key: str) -> "JsonValue | None":
        return self.members.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.members

    def __len__(self) -> int:
        return len(self.members)


JsonValue = Annotated[
    Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject],
    Field(discriminator="kind"),
]

JSON_VALUE_TYPES = (JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject)

JsonArray.model_rebuild()
JsonObject.model_rebuild()


# =============================================================================
# Decoding
# =============================================================================


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range: {text}")
    return value


def decode(text: str | bytes) -> JsonValue:
    """Decode JSON text into a JsonValue tree.

    Args:
        text: The JSON document, as str or UTF-8 bytes.

    Returns:
        The decoded value. A bare scalar document decodes to its scalar variant.

    Raises:
        ParseError: If the text is not well-formed JSON, holds a number too
            large for a float, or nests deeper than the interpreter allows.
    """
    try:
        raw = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
        return from_python(raw)
    except (ValueError, TypeError, RecursionError) as e:
        raise ParseError(f"malformed JSON: {e}") from e


def from_python(obj: Any) -> JsonValue:
    """Build a JsonValue from native JSON data.

    Containers and null become their variants, with members converted
    recursively. Anything else falls through to scalar conversion.
    """
    if obj is None:
        return JsonNull()
    if isinstance(obj, dict):
        return JsonObject(members={str(key): from_python(value) for key, value in obj.items()})
    if isinstance(obj, (list, tuple)):
        return JsonArray(items=tuple(from_python(item) for item in obj))
    return _scalar(obj)


def _scalar(obj: Any) -> JsonValue:
    # bool first: bool is a subclass of int
    if isinstance(obj, bool):
        return JsonBool(value=obj)
    if isinstance(obj, (int, float)):
        return JsonNumber(value=obj)
    if isinstance(obj, str):
        return JsonString(value=obj)
    raise CloudbaseValidationError(f"not a JSON value: {type(obj).__name__}")


# =============================================================================
# Encoding
# =============================================================================


def to_native(value: Any) -> Any:
    """Convert a JsonValue or a structured Python value into native JSON data.

    Record-like values (pydantic models, dataclasses, plain objects) become
    objects keyed by their field names.

    Raises:
        CloudbaseValidationError: If the value has no JSON representation.
    """
    if isinstance(value, JSON_VALUE_TYPES):
        return value.to_python()
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return to_native(value.value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {str(key): to_native(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_native(item) for item in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: to_native(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if hasattr(value, "__dict__") and not isinstance(value, type):
        return {
            key: to_native(item) for key, item in vars(value).items() if not key.startswith("_")
        }
    raise CloudbaseValidationError(f"cannot encode value of type {type(value).__name__}")


def encode(value: Any) -> str:
    """Encode a value as deterministic JSON text.

    Keys are sorted and separators are compact, so equal values always encode
    to the same text. Integers never gain a decimal point.

    Raises:
        CloudbaseValidationError: If the value cannot be encoded (unsupported
            type or a non-finite float).
    """
    native = to_native(value)
    try:
        return json.dumps(native, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (ValueError, TypeError) as e:
        raise CloudbaseValidationError(f"cannot encode value: {e}") from e
