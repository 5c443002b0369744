"""Tests for redaction logic."""

from cloudbase_sdk._internal.dispatch.redaction import REDACTED_VALUE, redact_fields, redact_payload


class TestRedactFields:
    """Tests for redact_fields function."""

    def test_redacts_app_password(self):
        """Should redact the application password field."""
        result = redact_fields([("app_uniq", "uniq"), ("app_pwd", "hash")])
        assert result == [("app_uniq", "uniq"), ("app_pwd", REDACTED_VALUE)]

    def test_redacts_auth_and_shared_passwords(self):
        result = dict(
            redact_fields(
                [
                    ("cb_auth_user", "ada"),
                    ("cb_auth_password", "pw"),
                    ("cb_shared_password", "shared"),
                ]
            )
        )
        assert result["cb_auth_user"] == "ada"
        assert result["cb_auth_password"] == REDACTED_VALUE
        assert result["cb_shared_password"] == REDACTED_VALUE

    def test_preserves_order(self):
        fields = [("b", "1"), ("app_pwd", "x"), ("a", "2")]
        assert [name for name, _ in redact_fields(fields)] == ["b", "app_pwd", "a"]

    def test_case_insensitive(self):
        assert redact_fields([("APP_PWD", "x")]) == [("APP_PWD", REDACTED_VALUE)]

    def test_accepts_generators(self):
        result = redact_fields((name, value) for name, value in [("token", "t")])
        assert result == [("token", REDACTED_VALUE)]


class TestRedactPayload:
    """Tests for redact_payload function."""

    def test_redacts_password(self):
        """Should redact password field."""
        payload = {"password": "secret123", "name": "test"}
        result = redact_payload(payload)
        assert result["password"] == REDACTED_VALUE
        assert result["name"] == "test"

    def test_redacts_nested_dicts(self):
        """Should redact sensitive keys in nested dicts."""
        payload = {
            "variables": {"token": "nested_token", "first_name": "Ada"},
        }
        result = redact_payload(payload)
        assert result["variables"]["token"] == REDACTED_VALUE
        assert result["variables"]["first_name"] == "Ada"

    def test_redacts_in_lists(self):
        """Should redact sensitive keys in documents inside lists."""
        payload = [
            {"name": "Alice", "password": "pass1"},
            {"name": "Bob", "password": "pass2"},
        ]
        result = redact_payload(payload)
        assert result[0]["name"] == "Alice"
        assert result[0]["password"] == REDACTED_VALUE
        assert result[1]["password"] == REDACTED_VALUE

    def test_case_insensitive_redaction(self):
        """Should redact keys case-insensitively."""
        result = redact_payload({"API_KEY": "upper", "Secret": "mixed"})
        assert result["API_KEY"] == REDACTED_VALUE
        assert result["Secret"] == REDACTED_VALUE

    def test_does_not_mutate_original(self):
        """Should not mutate the original payload."""
        nested: dict[str, str] = {"token": "tok"}
        original: dict[str, object] = {"password": "secret", "nested": nested}
        _ = redact_payload(original)
        assert original["password"] == "secret"
        assert nested["token"] == "tok"

    def test_scalars_pass_through(self):
        """Should return scalar payloads unchanged."""
        assert redact_payload(None) is None
        assert redact_payload("plain") == "plain"
        assert redact_payload(42) == 42

    def test_preserves_non_string_values(self):
        """Should preserve non-string values when not redacting."""
        payload = {
            "count": 42,
            "enabled": True,
            "rate": 3.14,
            "items": [1, 2, 3],
            "nothing": None,
        }
        assert redact_payload(payload) == payload

    def test_redacts_inside_tuples(self):
        """Documents held in a tuple should be walked like a list."""
        result = redact_payload(({"token": "t", "id": 1},))
        assert result == [{"token": REDACTED_VALUE, "id": 1}]

    def test_non_string_keys_kept(self):
        assert redact_payload({1: "one"}) == {1: "one"}
