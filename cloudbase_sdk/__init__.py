"""cloudbase.io SDK for Python.

Asynchronous client for the cloudbase.io backend-as-a-service: logging,
documents, files, push notifications, email, cloud functions and PayPal.

Public API:
    CloudbaseClient - Endpoint client
    Dispatcher - Shared request dispatcher (one per application)
    ResponseEnvelope, DispatchFailure, Skipped - Call outcomes
    Attachment, Location - Request inputs

Internal (system-level, not for direct use):
    _internal.dispatch - Request builder, dispatcher and envelope decoder
    _internal.json_value - JSON value model
"""

from cloudbase_sdk._internal.dispatch import (
    Attachment,
    Dispatcher,
    DispatchFailure,
    Location,
    ResponseEnvelope,
    SessionState,
    Skipped,
)
from cloudbase_sdk._version import __version__
from cloudbase_sdk.client import CloudbaseClient, hash_password

__all__ = [
    "__version__",
    "CloudbaseClient",
    "hash_password",
    "Dispatcher",
    "DispatchFailure",
    "ResponseEnvelope",
    "SessionState",
    "Skipped",
    "Attachment",
    "Location",
]
