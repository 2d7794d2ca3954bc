"""Response conditions evaluated by a health probe.

A condition set is a closed mapping of named predicates the probed response
must satisfy. Two predicates exist:

    - ``body_contains``: the response body contains the value as literal text.
    - ``status_code_equals_to``: the response status code equals the value.

Values that are "empty" (``None``, ``0``, ``""``, ``"0"``) leave the matching
predicate inactive, so ``status_code_equals_to=0`` is the same as not
configuring a status check at all.
"""

from collections.abc import Mapping
from typing import Any, Optional, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import InvalidInput


class HttpResponse(Protocol):
    """Minimal response surface the conditions are evaluated against."""

    status_code: int
    text: str


# ═══════════════════════════════════════════════════════════════════════════
# ACTIVATION RULE
# ═══════════════════════════════════════════════════════════════════════════

_EMPTY_VALUES = ("", "0", 0)


def _is_configured(value: Any) -> bool:
    """Return True when a condition value activates its predicate.

    Mirrors ``empty()`` semantics: ``None``, zero, the empty string and the
    string ``"0"`` all count as "not configured". An expectation of
    literally ``0`` or ``""`` cannot be expressed.
    """
    if value is None:
        return False
    return value not in _EMPTY_VALUES


# ═══════════════════════════════════════════════════════════════════════════
# CONDITION SET
# ═══════════════════════════════════════════════════════════════════════════

class HealthConditions(BaseModel):
    """Validated, immutable set of response conditions.

    Validation runs in pydantic's lax mode: ``status_code_equals_to`` accepts
    numeric strings (``"200"``) so conditions sourced from environment
    variables compare equal to the integer status code. Numbers given for
    ``body_contains`` are coerced to their string form.

    Attributes:
        body_contains: Literal substring expected in the response body.
        status_code_equals_to: Expected HTTP status code.
    """
    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
        coerce_numbers_to_str=True,
    )

    body_contains: Optional[str] = None
    status_code_equals_to: Optional[int] = None

    @field_validator('status_code_equals_to', mode='before')
    @classmethod
    def reject_boolean_status(cls, v: Any) -> Any:
        """Refuse booleans, which lax mode would silently turn into 0 or 1."""
        if isinstance(v, bool):
            raise ValueError("status_code_equals_to must be a status code, not a boolean")
        return v

    @classmethod
    def accepted_keys(cls) -> list[str]:
        return sorted(cls.model_fields)

    @classmethod
    def from_mapping(cls, conditions: Optional[Mapping[str, Any]]) -> 'HealthConditions':
        """Build a condition set from a user-provided mapping.

        Args:
            conditions: Mapping of condition names to expected values, or
                None for no conditions.

        Returns:
            The validated HealthConditions.

        Raises:
            InvalidInput: If ``conditions`` is not a mapping, names a key
                outside the accepted set, or holds a value that cannot be
                coerced to the condition's type.
        """
        if conditions is None:
            return cls()

        message = (
            "Wrong conditions were provided. The accepted ones are: "
            + ", ".join(cls.accepted_keys())
        )

        # Positional structures like ["body_contains"] carry no values.
        if not isinstance(conditions, Mapping):
            raise InvalidInput(message)

        if any(key not in cls.model_fields for key in conditions):
            raise InvalidInput(message)

        try:
            return cls.model_validate(dict(conditions))
        except ValidationError as exc:
            raise InvalidInput(f"{message}. Invalid condition value: {exc}") from exc

    @property
    def is_empty(self) -> bool:
        """True when no predicate is active."""
        return not (
            _is_configured(self.body_contains)
            or _is_configured(self.status_code_equals_to)
        )

    def body_matches(self, response: HttpResponse) -> bool:
        # Plain substring search; the needle is never treated as a pattern.
        return self.body_contains in str(response.text)

    def status_code_matches(self, response: HttpResponse) -> bool:
        return response.status_code == self.status_code_equals_to

    def failed_conditions(self, response: HttpResponse) -> list[str]:
        """Evaluate every active predicate against a response.

        Each active predicate is checked independently; inactive ones are
        skipped. The response is healthy when the returned list is empty.

        Args:
            response: The received HTTP response.

        Returns:
            Names of the active conditions the response does not satisfy.
        """
        failed = []

        if _is_configured(self.body_contains) and not self.body_matches(response):
            failed.append('body_contains')

        if _is_configured(self.status_code_equals_to) and not self.status_code_matches(response):
            failed.append('status_code_equals_to')

        return failed
