"""User-facing client for the cloudbase.io APIs.

Example usage:
    from cloudbase_sdk import CloudbaseClient, ResponseEnvelope, hash_password
    from cloudbase_sdk.models import SingleDocument

    async with CloudbaseClient(
        app_code="my-app",
        app_uniq="0123456789abcdef",
        password=hash_password("application password"),
    ) as client:
        await client.register_device()
        client.log_info("application started")

        outcome = await client.insert_documents(
            "users", SingleDocument(document={"name": "Ada"})
        )
        if isinstance(outcome, ResponseEnvelope) and outcome.success:
            print(outcome.data)

Every endpoint method returns immediately with an asyncio task; the task and
the optional continuation both receive the call's single outcome.
"""

import asyncio
import hashlib
import os
import platform
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from cloudbase_sdk._internal.dispatch.client import (
    DEFAULT_TIMEOUT_MS,
    Continuation,
    Dispatcher,
    Outcome,
)
from cloudbase_sdk._internal.dispatch.models import (
    DOWNLOAD_FUNCTION,
    REGISTER_FUNCTION,
    AppIdentity,
    Attachment,
    Credentials,
    Location,
    Request,
)
from cloudbase_sdk._internal.dispatch.session import SessionState
from cloudbase_sdk._internal.json_value import to_native
from cloudbase_sdk.exceptions import CloudbaseConfigError, CloudbaseValidationError
from cloudbase_sdk.models.documents import AggregationCommand, DocumentInput, document_list
from cloudbase_sdk.models.enums import LogLevel, NotificationType
from cloudbase_sdk.models.paypal import PayPalBill

DEFAULT_API_HOST = "api.cloudbase.io"
DEFAULT_LOG_CATEGORY = "DEFAULT"
DEFAULT_DEVICE_NETWORK = "win8"
PAYPAL_UPDATE_STATUS_PATH = "/paypal/update-status"

Task = asyncio.Task


def hash_password(password: str) -> str:
    """Return the lower-case MD5 hex digest cloudbase.io expects as app password."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


class CloudbaseClient:
    """Client for the cloudbase.io APIs.

    Each method builds one request and submits it through the shared
    Dispatcher. Requests that need a session (navigation logging) resolve to
    `Skipped` until `register_device` has completed successfully.

    Use `CloudbaseClient.from_env()` to create a client from environment
    variables.
    """

    def __init__(
        self,
        *,
        app_code: str,
        app_uniq: str | None = None,
        password: str | None = None,
        device_id: str | None = None,
        api_host: str = DEFAULT_API_HOST,
        https: bool = True,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        debug: bool = False,
        log_default_category: str = DEFAULT_LOG_CATEGORY,
        device_name: str | None = None,
        device_model: str | None = None,
        dispatcher: Dispatcher | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            app_code: The application code on cloudbase.io.
            app_uniq: The unique code generated when the application was created.
            password: MD5 hash of the application password (see `hash_password`).
            device_id: Identifier for this device. A random one is generated
                when omitted.
            api_host: Host name of the API.
            https: Use https (recommended) or plain http.
            timeout_ms: Request timeout in milliseconds.
            debug: Enable debug logging to stderr.
            log_default_category: Category used by log calls without one.
            device_name: Device name sent with log calls.
            device_model: Device model sent with log calls.
            dispatcher: Existing dispatcher to share. app_uniq, password and
                device_id are ignored when one is given.
            http_client: HTTP client for a dispatcher created by this client.

        Raises:
            CloudbaseConfigError: If neither a dispatcher nor app_uniq and
                password are given.
        """
        if not app_code:
            raise CloudbaseConfigError("app_code is required")

        if dispatcher is None:
            if not app_uniq or not password:
                raise CloudbaseConfigError("app_uniq and password are required")
            identity = AppIdentity(
                app_uniq=app_uniq,
                password=password,
                device_id=device_id or str(uuid.uuid4()),
            )
            dispatcher = Dispatcher(
                identity,
                http_client=http_client,
                session=SessionState(),
                timeout_ms=timeout_ms,
                debug=debug,
            )
            self._owns_dispatcher = True
        else:
            self._owns_dispatcher = False

        self._app_code = app_code
        self._api_host = api_host
        self._https = https
        self._debug = debug
        self._dispatcher = dispatcher
        self.log_default_category = log_default_category
        self.device_name = device_name or platform.node() or "unknown"
        self.device_model = device_model or platform.machine() or "unknown"
        self.credentials: Credentials | None = None
        self.location: Location | None = None

    @classmethod
    def from_env(cls) -> "CloudbaseClient":
        """Create a client from environment variables.

        Required environment variables:
            CLOUDBASE_APP_CODE: The application code.
            CLOUDBASE_APP_UNIQ: The application unique code.
            CLOUDBASE_APP_PWD: MD5 hash of the application password.

        Optional environment variables:
            CLOUDBASE_DEVICE_ID: The device identifier.
            CLOUDBASE_API_HOST: Host name of the API.
            CLOUDBASE_HTTPS: Set to "0" to use plain http.
            CLOUDBASE_TIMEOUT_MS: Request timeout in milliseconds.
            CLOUDBASE_DEBUG: Set to "1" to enable debug logging.

        Returns:
            A configured CloudbaseClient.

        Raises:
            CloudbaseConfigError: If a required variable is missing.
            ValueError: If CLOUDBASE_TIMEOUT_MS is not an integer.
        """
        app_code = os.environ.get("CLOUDBASE_APP_CODE")
        app_uniq = os.environ.get("CLOUDBASE_APP_UNIQ")
        password = os.environ.get("CLOUDBASE_APP_PWD")

        missing = [
            name
            for name, value in (
                ("CLOUDBASE_APP_CODE", app_code),
                ("CLOUDBASE_APP_UNIQ", app_uniq),
                ("CLOUDBASE_APP_PWD", password),
            )
            if not value
        ]
        if missing:
            raise CloudbaseConfigError(f"missing environment variables: {', '.join(missing)}")

        timeout_ms = int(os.environ.get("CLOUDBASE_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))

        return cls(
            app_code=app_code,  # type: ignore[arg-type]
            app_uniq=app_uniq,
            password=password,
            device_id=os.environ.get("CLOUDBASE_DEVICE_ID"),
            api_host=os.environ.get("CLOUDBASE_API_HOST", DEFAULT_API_HOST),
            https=os.environ.get("CLOUDBASE_HTTPS", "1") != "0",
            timeout_ms=timeout_ms,
            debug=os.environ.get("CLOUDBASE_DEBUG", "") == "1",
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def session(self) -> SessionState:
        return self._dispatcher.session

    @property
    def base_url(self) -> str:
        scheme = "https" if self._https else "http"
        return f"{scheme}://{self._api_host}/{self._app_code}"

    def set_credentials(self, username: str, password: str) -> None:
        """Send application-user credentials with every following request."""
        self.credentials = Credentials(username=username, password=password)

    def clear_credentials(self) -> None:
        self.credentials = None

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            import sys

            print(f"[cloudbase-sdk] {message}", file=sys.stderr)

    def _url(self, *path: str) -> str:
        return "/".join((self.base_url, *path))

    def _send(
        self,
        function: str,
        url: str,
        *,
        fields: Mapping[str, str | None] | None = None,
        payload: Any = None,
        attachments: Sequence[Attachment] | None = None,
        requires_session: bool = False,
        on_response: Continuation | None = None,
        on_download: Continuation | None = None,
    ) -> "Task[Outcome]":
        request = Request(
            function=function,
            url=url,
            fields={key: value for key, value in (fields or {}).items() if value is not None},
            payload=payload,
            attachments=tuple(attachments or ()),
            credentials=self.credentials,
            location=self.location,
            requires_session=requires_session,
        )
        return self._dispatcher.submit(request, on_response=on_response, on_download=on_download)

    # =========================================================================
    # Device & Logging
    # =========================================================================

    def register_device(
        self,
        *,
        device_type: str | None = None,
        language: str = "en",
        country: str = "us",
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Register this device and obtain a session identifier.

        Calls that need a session should be made once this task has completed
        (or from its continuation).

        Args:
            device_type: Operating system of the device.
            language: Language of the device.
            country: Country of the device.
            on_response: Receives the registration outcome.

        Returns:
            The task running the call.
        """
        fields = {
            "device_type": device_type or platform.system() or "unknown",
            "device_name": self.device_name,
            "device_model": self.device_model,
            "language": language,
            "country": country,
        }
        return self._send(
            REGISTER_FUNCTION, self._url("register"), fields=fields, on_response=on_response
        )

    def log(
        self,
        level: LogLevel,
        line: str,
        category: str | None = None,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Send a line to the application log on cloudbase.io.

        Args:
            level: Log level of the entry.
            line: The line to be logged.
            category: Category of the entry. Defaults to log_default_category.
            on_response: Receives the outcome of the call.

        Returns:
            The task running the call.
        """
        fields = {
            "category": category or self.log_default_category,
            "level": LogLevel(level).value,
            "log_line": line,
            "device_name": self.device_name,
            "device_model": self.device_model,
        }
        return self._send("log", self._url("log"), fields=fields, on_response=on_response)

    def log_debug(self, line: str, category: str | None = None) -> "Task[Outcome]":
        return self.log(LogLevel.DEBUG, line, category)

    def log_info(self, line: str, category: str | None = None) -> "Task[Outcome]":
        return self.log(LogLevel.INFO, line, category)

    def log_warning(self, line: str, category: str | None = None) -> "Task[Outcome]":
        return self.log(LogLevel.WARNING, line, category)

    def log_error(self, line: str, category: str | None = None) -> "Task[Outcome]":
        return self.log(LogLevel.ERROR, line, category)

    def log_fatal(self, line: str, category: str | None = None) -> "Task[Outcome]":
        return self.log(LogLevel.FATAL, line, category)

    def log_event(self, line: str, category: str) -> "Task[Outcome]":
        """Log a custom event used to build event analytics."""
        return self.log(LogLevel.EVENT, line, category)

    def log_navigation(
        self, screen_name: str, *, on_response: Continuation | None = None
    ) -> "Task[Outcome]":
        """Record that the user moved to a new screen.

        Resolves to `Skipped` when the device has not registered yet.
        """
        return self._send(
            "log-navigation",
            self._url("lognavigation"),
            fields={"screen_name": screen_name},
            requires_session=True,
            on_response=on_response,
        )

    # =========================================================================
    # Data
    # =========================================================================

    def insert_documents(
        self,
        collection: str,
        documents: DocumentInput,
        attachments: Sequence[Attachment] | None = None,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Insert documents into a collection, creating it if needed.

        Attached files are stored on cloudbase.io and listed in the "cb_files"
        field of the inserted document.

        Args:
            collection: Name of the collection.
            documents: A SingleDocument or a DocumentBatch.
            attachments: Files to attach to the document.
            on_response: Receives the outcome of the call.

        Returns:
            The task running the call.
        """
        return self._send(
            "data",
            self._url(collection, "insert"),
            payload=document_list(documents),
            attachments=attachments,
            on_response=on_response,
        )

    def search_documents(
        self,
        collection: str,
        conditions: Mapping[str, Any],
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Search a collection. Matching documents come back as the payload."""
        return self._send(
            "data",
            self._url(collection, "search"),
            payload=dict(conditions),
            on_response=on_response,
        )

    def aggregate_documents(
        self,
        collection: str,
        commands: Sequence[AggregationCommand],
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Search a collection and run an aggregation pipeline over the output."""
        payload = {"cb_aggregate_key": [command.serialize() for command in commands]}
        return self._send(
            "data",
            self._url(collection, "aggregate"),
            payload=payload,
            on_response=on_response,
        )

    def update_documents(
        self,
        collection: str,
        conditions: Mapping[str, Any],
        documents: DocumentInput,
        attachments: Sequence[Attachment] | None = None,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Replace the documents matching conditions with the given documents.

        Raises:
            CloudbaseValidationError: If a document does not serialize to an object.
        """
        payload = []
        for document in document_list(documents):
            native = to_native(document)
            if not isinstance(native, dict):
                raise CloudbaseValidationError("documents must serialize to JSON objects")
            native["cb_search_key"] = to_native(conditions)
            payload.append(native)

        return self._send(
            "data",
            self._url(collection, "update"),
            payload=payload,
            attachments=attachments,
            on_response=on_response,
        )

    def download_file(self, file_id: str, on_download: Continuation | None = None) -> "Task[Outcome]":
        """Download a file using the id from a document's cb_files field.

        The task resolves to the raw file content.
        """
        return self._send(DOWNLOAD_FUNCTION, self._url("file", file_id), on_download=on_download)

    # =========================================================================
    # Notifications & Email
    # =========================================================================

    def subscribe_to_channel(
        self,
        device_key: str,
        channel: str | None = None,
        *,
        device_network: str = DEFAULT_DEVICE_NETWORK,
    ) -> "Task[Outcome]":
        """Subscribe the device to a notification channel in addition to "all"."""
        fields = {
            "action": "subscribe",
            "device_key": device_key,
            "device_network": device_network,
            "channel": channel,
        }
        return self._send(
            "notifications-register", self._url("notifications-register"), fields=fields
        )

    def unsubscribe_from_channel(
        self,
        device_key: str,
        channel: str | None = None,
        *,
        from_all: bool = False,
        device_network: str = DEFAULT_DEVICE_NETWORK,
    ) -> "Task[Outcome]":
        """Unsubscribe the device from a channel, or from every channel with from_all."""
        fields = {
            "action": "unsubscribe",
            "device_key": device_key,
            "device_network": device_network,
            "channel": channel,
        }
        if from_all:
            fields["from_all"] = "true"
        return self._send(
            "notifications-register", self._url("notifications-register"), fields=fields
        )

    def send_notification(
        self,
        notification_type: NotificationType,
        channel: str,
        title: str,
        subtitle: str = "",
        image_uri: str = "",
    ) -> "Task[Outcome]":
        """Send a push notification to every device subscribed to a channel."""
        fields = {
            "channel": channel,
            "win_type": NotificationType(notification_type).value,
            "alert": title,
            "alert2": subtitle,
            "image_uri": image_uri,
        }
        return self._send("notifications", self._url("notifications"), fields=fields)

    def send_email(
        self,
        template: str,
        recipient: str,
        subject: str,
        variables: Mapping[str, str] | None = None,
    ) -> "Task[Outcome]":
        """Send an email built from a template created on cloudbase.io."""
        payload = {
            "template_code": template,
            "recipient": recipient,
            "subject": subject,
            "variables": dict(variables or {}),
        }
        return self._send("email", self._url("email"), payload=payload)

    # =========================================================================
    # Cloud Functions
    # =========================================================================

    def execute_cloud_function(
        self,
        code: str,
        params: Mapping[str, str] | None = None,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Run a CloudFunction. params reach it as POST parameters."""
        return self._send(
            "cloudfunction", self._url("cloudfunction", code), fields=params, on_response=on_response
        )

    def execute_applet(
        self,
        code: str,
        params: Mapping[str, str] | None = None,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        return self._send("applet", self._url("applet", code), fields=params, on_response=on_response)

    def execute_shared_api(
        self,
        code: str,
        password: str | None = None,
        params: Mapping[str, str] | None = None,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Run a Shared API, sending its password when one is given."""
        fields = dict(params or {})
        if password:
            fields["cb_shared_password"] = password
        return self._send("shared-api", self._url("shared", code), fields=fields, on_response=on_response)

    # =========================================================================
    # PayPal
    # =========================================================================

    def prepare_paypal_purchase(
        self,
        bill: PayPalBill,
        live: bool = False,
        *,
        on_response: Continuation | None = None,
    ) -> "Task[Outcome]":
        """Request a PayPal express checkout token for a bill.

        The payload of the response carries the token and the checkout URL.

        Args:
            bill: The bill to pay, with at least one item.
            live: Use the PayPal production environment instead of the sandbox.
            on_response: Receives the outcome of the call.

        Returns:
            The task running the call.
        """
        payload: dict[str, Any] = {
            "purchase_details": bill.serialize_purchase(),
            "environment": "live" if live else "sandbox",
            "currency": bill.currency,
            "type": "purchase",
            "completed_cloudfunction": bill.payment_completed_function,
            "cancelled_cloudfunction": bill.payment_cancelled_function,
        }
        if bill.payment_completed_url is not None:
            payload["payment_completed_url"] = bill.payment_completed_url
        if bill.payment_cancelled_url is not None:
            payload["payment_cancelled_url"] = bill.payment_cancelled_url

        return self._send(
            "paypal", self._url("paypal", "prepare"), payload=payload, on_response=on_response
        )

    def check_paypal_payment(
        self, browser_url: str, *, on_response: Continuation | None = None
    ) -> "Task[Outcome] | None":
        """Complete a PayPal payment once the browser reaches the update page.

        Call this with every URL the checkout browser navigates to.

        Returns:
            The task updating the payment status when the URL is the
            cloudbase.io update page, otherwise None (PayPal is still
            interacting with the user).
        """
        if PAYPAL_UPDATE_STATUS_PATH not in browser_url:
            return None
        self._log_debug(f"PayPal payment finished: {browser_url}")
        return self._send("paypal", browser_url, fields={}, on_response=on_response)

    def get_paypal_payment_details(
        self, payment_id: str, *, on_response: Continuation | None = None
    ) -> "Task[Outcome]":
        return self._send(
            "paypal",
            self._url("paypal", "payment-details"),
            fields={"payment_id": payment_id},
            on_response=on_response,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def aclose(self) -> None:
        """Wait for in-flight calls and release the dispatcher this client created."""
        if self._owns_dispatcher:
            await self._dispatcher.aclose()

    async def __aenter__(self) -> "CloudbaseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
