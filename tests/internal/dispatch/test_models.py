"""Tests for request and outcome models."""

import pytest
from pydantic import ValidationError

from cloudbase_sdk._internal.dispatch.models import (
    AppIdentity,
    Attachment,
    Credentials,
    DispatchFailure,
    Location,
    Request,
    Skipped,
)
from cloudbase_sdk.exceptions import TransportError


class TestAppIdentity:
    """Tests for AppIdentity model."""

    def test_lower_cases_password(self):
        identity = AppIdentity(app_uniq="u", password="9F86D081", device_id="d")
        assert identity.password == "9f86d081"

    @pytest.mark.parametrize("field", ["app_uniq", "password", "device_id"])
    def test_fields_must_not_be_empty(self, field):
        values = {"app_uniq": "u", "password": "p", "device_id": "d"}
        values[field] = ""
        with pytest.raises(ValidationError) as exc_info:
            AppIdentity(**values)
        assert field in str(exc_info.value)


class TestLocation:
    """Tests for Location model."""

    def test_zero_latitude_is_not_populated(self):
        assert Location(latitude=0, longitude=45.0).populated is False

    def test_non_zero_latitude_is_populated(self):
        assert Location(latitude=12.5, longitude=0).populated is True

    def test_altitude_defaults_to_zero(self):
        assert Location(latitude=1, longitude=2).altitude == 0.0


class TestRequest:
    """Tests for Request model."""

    def test_defaults(self):
        request = Request(function="log", url="https://api.cloudbase.io/app/log")
        assert request.fields == {}
        assert request.payload is None
        assert request.attachments == ()
        assert request.credentials is None
        assert request.location is None
        assert request.requires_session is False

    def test_with_all_fields(self):
        request = Request(
            function="data",
            url="https://api.cloudbase.io/app/users/insert",
            fields={"a": "b"},
            payload=[{"name": "Ada"}],
            attachments=(Attachment(file_name="f.txt", data=b"x"),),
            credentials=Credentials(username="ada", password="pw"),
            location=Location(latitude=1, longitude=2, altitude=3),
            requires_session=True,
        )
        assert request.attachments[0].file_name == "f.txt"
        assert request.credentials.username == "ada"
        assert request.location.altitude == 3

    def test_fields_must_be_strings(self):
        with pytest.raises(ValidationError):
            Request(function="log", url="https://x", fields={"count": object()})


class TestOutcomes:
    """Tests for DispatchFailure and Skipped."""

    def test_dispatch_failure_holds_error(self):
        error = TransportError("down")
        failure = DispatchFailure(function="log", error=error)
        assert failure.error is error
        assert failure.function == "log"

    def test_dispatch_failure_rejects_non_sdk_errors(self):
        with pytest.raises(ValidationError):
            DispatchFailure(function="log", error=ValueError("x"))

    def test_skipped(self):
        skipped = Skipped(function="log-navigation", reason="no session")
        assert skipped.reason == "no session"
