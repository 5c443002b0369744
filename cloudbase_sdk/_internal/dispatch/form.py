"""Multipart form construction for cloudbase.io requests."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from cloudbase_sdk._internal.dispatch.models import AppIdentity, Request
from cloudbase_sdk._internal.json_value import encode

ATTACHMENT_CONTENT_TYPE = "application/octet-stream"


class FilePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    file_name: str
    data: bytes


class MultipartForm(BaseModel):
    """Transport-ready form: ordered text fields plus binary parts."""

    model_config = ConfigDict(frozen=True)

    fields: tuple[tuple[str, str], ...] = ()
    files: tuple[FilePart, ...] = ()

    def field(self, name: str) -> str | None:
        """Return the last value sent for a field, or None if absent."""
        value = None
        for key, item in self.fields:
            if key == name:
                value = item
        return value

    @property
    def field_names(self) -> list[str]:
        return [key for key, _ in self.fields]

    def to_httpx(self) -> list[tuple[str, Any]]:
        """Render every part for httpx's `files=` argument.

        Text fields are sent without a filename so httpx always produces a
        multipart/form-data body, even when there are no attachments.
        """
        parts: list[tuple[str, Any]] = [(key, (None, value)) for key, value in self.fields]
        parts.extend(
            (part.name, (part.file_name, part.data, ATTACHMENT_CONTENT_TYPE)) for part in self.files
        )
        return parts


def build_form(
    request: Request,
    identity: AppIdentity,
    *,
    session_id: str | None = None,
) -> MultipartForm:
    """Build the multipart form for a request.

    Pure function of its inputs: no I/O, no side effects.

    Args:
        request: The request to send.
        identity: Application credentials included in every form.
        session_id: Session identifier to attach, if any.

    Returns:
        The form to post to request.url.

    Raises:
        CloudbaseValidationError: If the payload cannot be encoded.
    """
    fields: list[tuple[str, str]] = [
        ("app_uniq", identity.app_uniq),
        ("app_pwd", identity.password),
        ("device_uniq", identity.device_id),
        ("post_data", encode(request.payload) if request.payload is not None else ""),
    ]

    fields.extend(request.fields.items())

    if request.credentials is not None:
        fields.append(("cb_auth_user", request.credentials.username))
        fields.append(("cb_auth_password", request.credentials.password))

    location = request.location
    if location is not None and location.populated:
        fields.append(
            (
                "location_data",
                encode(
                    {
                        "lat": str(location.latitude),
                        "lng": str(location.longitude),
                        "alt": str(location.altitude),
                    }
                ),
            )
        )

    if session_id is not None:
        fields.append(("session_id", session_id))

    files = tuple(
        FilePart(name=f"file_{index}", file_name=attachment.file_name, data=attachment.data)
        for index, attachment in enumerate(request.attachments)
    )

    return MultipartForm(fields=tuple(fields), files=files)
