"""Request/response pipeline for the cloudbase.io API.

WARNING: This is a system-level module used by CloudbaseClient.
Do not call directly from user code.
"""

from cloudbase_sdk._internal.dispatch.client import Dispatcher, Outcome
from cloudbase_sdk._internal.dispatch.envelope import ResponseEnvelope, decode_envelope, parse_status_line
from cloudbase_sdk._internal.dispatch.form import MultipartForm, build_form
from cloudbase_sdk._internal.dispatch.models import (
    AppIdentity,
    Attachment,
    Credentials,
    DispatchFailure,
    Location,
    Request,
    Skipped,
)
from cloudbase_sdk._internal.dispatch.session import SessionState

__all__ = [
    "Dispatcher",
    "Outcome",
    "ResponseEnvelope",
    "decode_envelope",
    "parse_status_line",
    "MultipartForm",
    "build_form",
    "AppIdentity",
    "Attachment",
    "Credentials",
    "DispatchFailure",
    "Location",
    "Request",
    "Skipped",
    "SessionState",
]
