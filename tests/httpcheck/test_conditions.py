"""Test suite for response condition validation and evaluation."""

import httpx
import pytest
from pydantic import ValidationError

from httpcheck.conditions import HealthConditions, _is_configured
from httpcheck.exceptions import InvalidInput


class TestFromMapping:
    """Building condition sets from user mappings."""

    def test_none_yields_empty_set(self) -> None:
        conditions = HealthConditions.from_mapping(None)
        assert conditions.is_empty

    def test_accepted_keys(self) -> None:
        assert HealthConditions.accepted_keys() == ["body_contains", "status_code_equals_to"]

    def test_status_code_string_is_coerced(self) -> None:
        conditions = HealthConditions.from_mapping({"status_code_equals_to": "204"})
        assert conditions.status_code_equals_to == 204

    def test_numeric_body_is_coerced_to_text(self) -> None:
        conditions = HealthConditions.from_mapping({"body_contains": 42})
        assert conditions.body_contains == "42"

    def test_body_whitespace_is_preserved(self) -> None:
        """Should keep the needle byte-for-byte, surrounding spaces included."""
        conditions = HealthConditions.from_mapping({"body_contains": " ok "})
        assert conditions.body_contains == " ok "

    def test_non_numeric_status_code_is_rejected(self) -> None:
        """Should wrap pydantic's ValidationError into InvalidInput."""
        with pytest.raises(InvalidInput) as exc_info:
            HealthConditions.from_mapping({"status_code_equals_to": "two hundred"})

        assert isinstance(exc_info.value.__cause__, ValidationError)

    @pytest.mark.parametrize("flag", [True, False])
    def test_boolean_status_code_is_rejected(self, flag) -> None:
        """Should not let lax mode turn a boolean into status code 1 or 0."""
        with pytest.raises(InvalidInput, match="not a boolean"):
            HealthConditions.from_mapping({"status_code_equals_to": flag})

    def test_is_frozen(self) -> None:
        conditions = HealthConditions.from_mapping({"body_contains": "ok"})
        with pytest.raises(ValidationError):
            conditions.body_contains = "changed"  # type: ignore


class TestIsConfigured:
    """Activation rule for condition values."""

    @pytest.mark.parametrize("value", [None, 0, "", "0", 0.0, False])
    def test_empty_values_are_inactive(self, value) -> None:
        assert _is_configured(value) is False

    @pytest.mark.parametrize("value", [200, "ok", " ", "00", "$it"])
    def test_other_values_are_active(self, value) -> None:
        assert _is_configured(value) is True


class TestFailedConditions:
    """Predicate evaluation over responses."""

    def test_no_conditions_never_fail(self) -> None:
        conditions = HealthConditions()
        assert conditions.failed_conditions(httpx.Response(500, text="")) == []

    def test_reports_each_failing_condition(self) -> None:
        conditions = HealthConditions(status_code_equals_to=200, body_contains="ok")
        response = httpx.Response(500, text="error")

        assert conditions.failed_conditions(response) == ["body_contains", "status_code_equals_to"]

    def test_reports_only_failing_condition(self) -> None:
        conditions = HealthConditions(status_code_equals_to=200, body_contains="ok")
        response = httpx.Response(200, text="not quite")

        assert conditions.failed_conditions(response) == ["body_contains"]

    def test_body_is_decoded_before_matching(self) -> None:
        """Should search the decoded text, not the raw bytes."""
        conditions = HealthConditions(body_contains="café")
        response = httpx.Response(
            200,
            content="menu: café".encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

        assert conditions.failed_conditions(response) == []
