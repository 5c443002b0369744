"""Process-lifetime session identifier issued by device registration."""

import threading

from cloudbase_sdk._internal.dispatch.envelope import ResponseEnvelope
from cloudbase_sdk._internal.dispatch.models import REGISTER_FUNCTION
from cloudbase_sdk._internal.json_value import JsonNull, JsonObject, JsonString

SESSION_KEY = "sessionid"


class SessionState:
    """Holds the session identifier shared by all requests of a client.

    Written only by a successful device registration and read when building
    requests that want a session. Concurrent registrations resolve as last
    writer wins; every read and write goes through one lock.
    """

    def __init__(self, value: str | None = None) -> None:
        self._lock = threading.Lock()
        self._value = value

    @property
    def value(self) -> str | None:
        with self._lock:
            return self._value

    @property
    def is_set(self) -> bool:
        return self.value is not None

    def set(self, value: str) -> None:
        with self._lock:
            self._value = value

    def update_from_registration(self, envelope: ResponseEnvelope) -> bool:
        """Store the session identifier carried by a registration response.

        Args:
            envelope: A decoded response.

        Returns:
            True if the session was updated. Other functions, failed
            registrations and payloads without "sessionid" leave it unchanged.
        """
        if envelope.function != REGISTER_FUNCTION or not envelope.success:
            return False
        if not isinstance(envelope.payload, JsonObject):
            return False

        session = envelope.payload.get(SESSION_KEY)
        if session is None or isinstance(session, JsonNull):
            return False

        value = session.value if isinstance(session, JsonString) else str(session.to_python())
        self.set(value)
        return True
