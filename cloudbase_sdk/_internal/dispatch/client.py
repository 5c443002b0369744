"""Asynchronous request dispatcher for the cloudbase.io API."""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any, TypeAlias

import httpx

from cloudbase_sdk._internal.dispatch.envelope import ResponseEnvelope, decode_envelope
from cloudbase_sdk._internal.dispatch.form import MultipartForm, build_form
from cloudbase_sdk._internal.dispatch.models import AppIdentity, DispatchFailure, Request, Skipped
from cloudbase_sdk._internal.dispatch.redaction import redact_fields, redact_payload
from cloudbase_sdk._internal.dispatch.session import SessionState
from cloudbase_sdk._internal.http import create_http_client
from cloudbase_sdk._internal.json_value import to_native
from cloudbase_sdk.exceptions import CloudbaseAPIError, CloudbaseError, TransportError

DEFAULT_TIMEOUT_MS = 30000
STATUS_HEADER = "STATUS"

Outcome: TypeAlias = ResponseEnvelope | bytes | DispatchFailure | Skipped
Continuation: TypeAlias = Callable[[Any], Any]


class Dispatcher:
    """Submits requests and delivers each result to a continuation.

    Every `submit` starts its own asyncio task and returns it immediately.
    The task resolves to exactly one outcome, which is also handed to exactly
    one continuation, exactly once:

        ResponseEnvelope  - JSON calls, including status != "OK"
        bytes             - download calls
        DispatchFailure   - transport failures and undecodable responses
        Skipped           - calls that need a session when none exists

    There is no queueing, no concurrency limit and no retry. Two submitted
    requests complete in no particular order; callers that need B to see the
    effect of A must submit B from A's continuation.

    Create one dispatcher per application and share it.
    """

    def __init__(
        self,
        identity: AppIdentity,
        *,
        http_client: httpx.AsyncClient | None = None,
        session: SessionState | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        debug: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            identity: Application credentials sent with every request.
            http_client: Client to send requests with. When omitted, the
                dispatcher creates one and closes it in `aclose`.
            session: Session state to read and update.
            timeout_ms: Request timeout in milliseconds for an owned client.
            debug: Enable debug logging to stderr.
        """
        self._identity = identity
        self._owns_client = http_client is None
        self._http_client = http_client or create_http_client(timeout=timeout_ms / 1000)
        self._session = session if session is not None else SessionState()
        self._debug = debug
        self._tasks: set[asyncio.Task[Outcome]] = set()

    @property
    def identity(self) -> AppIdentity:
        return self._identity

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def pending(self) -> int:
        """Number of submitted requests that have not completed yet."""
        return len(self._tasks)

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            import sys

            print(f"[cloudbase-sdk] {message}", file=sys.stderr)

    def submit(
        self,
        request: Request,
        *,
        on_response: Continuation | None = None,
        on_download: Continuation | None = None,
    ) -> "asyncio.Task[Outcome]":
        """Submit a request without waiting for it.

        Must be called from a running event loop.

        Args:
            request: The request to send.
            on_response: Receives the outcome of a JSON call.
            on_download: Receives the outcome of a download call.

        Returns:
            The task running the call. Awaiting it yields the same outcome the
            continuation receives.

        Raises:
            RuntimeError: If no event loop is running.
            CloudbaseValidationError: If the request payload cannot be encoded.
        """
        loop = asyncio.get_running_loop()
        continuation = on_download if request.is_download else on_response

        session_id: str | None = None
        if request.requires_session:
            session_id = self._session.value
            if session_id is None:
                self._log_debug(f"Skipping {request.function}: no session")
                skipped = Skipped(function=request.function, reason="no session")
                return self._track(loop.create_task(self._resolve(request, skipped, continuation)))

        form = build_form(request, self._identity, session_id=session_id)
        if self._debug:
            self._log_debug(f"Sending {request.function} to {request.url}: {_describe(request, form)}")
        return self._track(loop.create_task(self._execute(request, form, continuation)))

    def _track(self, task: "asyncio.Task[Outcome]") -> "asyncio.Task[Outcome]":
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _execute(
        self,
        request: Request,
        form: MultipartForm,
        continuation: Continuation | None,
    ) -> Outcome:
        outcome = await self._exchange(request, form)
        return await self._resolve(request, outcome, continuation)

    async def _exchange(self, request: Request, form: MultipartForm) -> Outcome:
        """Post the form and turn the response into an outcome."""
        try:
            response = await self._http_client.post(request.url, files=form.to_httpx())
        except httpx.TimeoutException as e:
            self._log_debug(f"{request.function} timed out")
            return DispatchFailure(
                function=request.function, error=TransportError("request timed out", e)
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._log_debug(f"{request.function} failed: {e}")
            return DispatchFailure(
                function=request.function, error=TransportError(f"request failed: {e}", e)
            )

        if request.is_download:
            if response.status_code >= 400:
                self._log_debug(f"Download failed with status {response.status_code}")
                return DispatchFailure(
                    function=request.function,
                    error=CloudbaseAPIError(
                        f"download failed with status {response.status_code}",
                        status_code=response.status_code,
                    ),
                )
            return response.content

        if self._debug:
            self._log_debug(f"Response received: {response.text[:500]}")
        try:
            envelope = decode_envelope(response.content, _status_line(response), request.function)
        except CloudbaseError as e:
            self._log_debug(f"Could not decode {request.function} response: {e}")
            return DispatchFailure(function=request.function, error=e)

        if self._session.update_from_registration(envelope):
            self._log_debug(f"Retrieved session: {self._session.value}")
        return envelope

    async def _resolve(
        self,
        request: Request,
        outcome: Outcome,
        continuation: Continuation | None,
    ) -> Outcome:
        """Hand the outcome to the continuation, if there is one."""
        if continuation is not None:
            try:
                result = continuation(outcome)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._log_debug(f"Continuation for {request.function} raised: {e!r}")
        return outcome

    async def aclose(self) -> None:
        """Wait for in-flight requests, then close an owned HTTP client."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._owns_client:
            await self._http_client.aclose()


def _describe(request: Request, form: MultipartForm) -> str:
    """Summarize a request for the debug log with secrets redacted."""
    fields = redact_fields((name, value) for name, value in form.fields if name != "post_data")
    payload = redact_payload(to_native(request.payload))
    files = [part.file_name for part in form.files]
    return f"fields={fields} payload={payload} files={files}"


def _status_line(response: httpx.Response) -> str:
    """Return the STATUS header, or the real status line when it is absent."""
    status = response.headers.get(STATUS_HEADER)
    if status:
        return status
    return f"{response.http_version} {response.status_code} {response.reason_phrase}"
