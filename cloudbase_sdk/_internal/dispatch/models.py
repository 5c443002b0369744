"""Pydantic models for requests and dispatch outcomes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cloudbase_sdk.exceptions import CloudbaseError

# =============================================================================
# Constants
# =============================================================================

DOWNLOAD_FUNCTION = "download"
REGISTER_FUNCTION = "register-device"

# =============================================================================
# Request Inputs
# =============================================================================


class AppIdentity(BaseModel):
    """Application credentials sent with every request.

    Required fields:
        app_uniq: Unique application code generated by cloudbase.io
        password: MD5 hash of the application password (stored lower-cased)
        device_id: Identifier of the device making the calls
    """

    model_config = ConfigDict(frozen=True)

    app_uniq: str = Field(min_length=1)
    password: str = Field(min_length=1)
    device_id: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_lower(cls, v: str) -> str:
        return v.lower()


class Attachment(BaseModel):
    """A file attached to a request. The whole file is held in memory."""

    model_config = ConfigDict(frozen=True)

    file_name: str = Field(min_length=1)
    data: bytes


class Credentials(BaseModel):
    """Application-user credentials checked against the users collection."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str


class Location(BaseModel):
    """Device position sent along with requests."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    altitude: float = 0.0

    @property
    def populated(self) -> bool:
        """Whether the backend treats this location as set.

        A latitude of exactly zero means "no location" on the wire.
        """
        return self.latitude != 0


class Request(BaseModel):
    """A single call to the cloudbase.io API.

    Required fields:
        function: Function identifier, also the key of the response envelope
        url: Full endpoint URL

    Optional fields:
        fields: Flat form fields, one multipart field each
        payload: Structured payload serialized into post_data
        attachments: Files sent as file_0, file_1, ...
        credentials: Application-user credentials
        location: Device position
        requires_session: Attach session_id; skip the call when no session exists
    """

    model_config = ConfigDict(frozen=True)

    function: str = Field(min_length=1)
    url: str = Field(min_length=1)
    fields: dict[str, str] = Field(default_factory=dict)
    payload: Any = None
    attachments: tuple[Attachment, ...] = ()
    credentials: Credentials | None = None
    location: Location | None = None
    requires_session: bool = False

    @property
    def is_download(self) -> bool:
        return self.function == DOWNLOAD_FUNCTION


# =============================================================================
# Outcomes
# =============================================================================


class DispatchFailure(BaseModel):
    """A call that ended without a usable response.

    Delivered to the continuation in place of a response when the network
    exchange fails or the response cannot be decoded.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    function: str
    error: CloudbaseError


class Skipped(BaseModel):
    """A call that was never sent because a precondition was not met."""

    model_config = ConfigDict(frozen=True)

    function: str
    reason: str
