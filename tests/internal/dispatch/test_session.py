"""Tests for SessionState."""

import threading

from cloudbase_sdk._internal.dispatch.envelope import decode_envelope
from cloudbase_sdk._internal.dispatch.session import SessionState


def registration(message: str, status: str = "OK", function: str = "register-device"):
    body = f'{{"{function}":{{"status":"{status}","message":{message}}}}}'
    return decode_envelope(body, "HTTP/1.1 200 OK", function)


class TestSessionState:
    """Tests for SessionState."""

    def test_starts_unset(self):
        session = SessionState()
        assert session.value is None
        assert session.is_set is False

    def test_set(self):
        session = SessionState()
        session.set("abc")
        assert session.value == "abc"
        assert session.is_set is True

    def test_updates_from_registration(self):
        """A registration payload with sessionid should populate the session."""
        session = SessionState()
        assert session.update_from_registration(registration('{"sessionid": "abc123"}')) is True
        assert session.value == "abc123"

    def test_numeric_session_id_converted_to_string(self):
        session = SessionState()
        session.update_from_registration(registration('{"sessionid": 42}'))
        assert session.value == "42"

    def test_new_registration_overwrites(self):
        session = SessionState("old")
        session.update_from_registration(registration('{"sessionid": "new"}'))
        assert session.value == "new"

    def test_ignores_other_functions(self):
        session = SessionState()
        envelope = registration('{"sessionid": "abc"}', function="log")
        assert session.update_from_registration(envelope) is False
        assert session.value is None

    def test_ignores_failed_registration(self):
        session = SessionState("kept")
        assert session.update_from_registration(registration('{"sessionid": "x"}', status="KO")) is False
        assert session.value == "kept"

    def test_ignores_payload_without_session(self):
        session = SessionState()
        assert session.update_from_registration(registration('"registered"')) is False
        assert session.update_from_registration(registration('{"other": 1}')) is False
        assert session.update_from_registration(registration('{"sessionid": null}')) is False
        assert session.value is None

    def test_concurrent_writers_leave_one_value(self):
        """Racing writers should leave exactly one of the written values."""
        session = SessionState()
        values = [f"session-{i}" for i in range(20)]
        threads = [threading.Thread(target=session.set, args=(value,)) for value in values]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert session.value in values
