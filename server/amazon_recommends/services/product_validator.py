"""Field validation for product payloads.

Rules are plain data: a constraint set is a tuple of ``FieldRule`` values and
each rule owns a list of ``Check`` objects that can be evaluated on their own.
Two constraint sets exist, one for full payloads (create and full update) and
one for partial updates.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from pydantic import AnyUrl, TypeAdapter, ValidationError

ASIN_LENGTH = 10
MAX_PRICE = 9_999_999_999

_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")
_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class Violation:
    """A single broken rule on a single field."""

    field: str
    rule: str
    limit: Any = None

    def as_dict(self) -> dict[str, Any]:
        return {"field": self.field, "rule": self.rule, "limit": self.limit}


@dataclass(frozen=True)
class Check:
    """A named predicate with the limit it enforces."""

    rule: str
    limit: Any
    predicate: Callable[[Any], bool]

    def evaluate(self, field_name: str, value: Any) -> Violation | None:
        if self.predicate(value):
            return None
        return Violation(field=field_name, rule=self.rule, limit=self.limit)


def min_length(limit: int) -> Check:
    return Check("min", limit, lambda value: len(value) >= limit)


def max_length(limit: int) -> Check:
    return Check("max", limit, lambda value: len(value) <= limit)


def exact_length(limit: int) -> Check:
    return Check("len", limit, lambda value: len(value) == limit)


def min_value(limit: int) -> Check:
    return Check("min", limit, lambda value: value >= limit)


def max_value(limit: int) -> Check:
    return Check("max", limit, lambda value: value <= limit)


def alphanumeric() -> Check:
    return Check("alphanum", None, lambda value: _ALPHANUMERIC.fullmatch(value) is not None)


def _is_url(value: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def valid_url() -> Check:
    return Check("url", None, _is_url)


def _is_type(value: Any, kind: type) -> bool:
    # bool is a subclass of int but never a valid price
    if kind is int and isinstance(value, bool):
        return False
    return isinstance(value, kind)


@dataclass(frozen=True)
class FieldRule:
    """Constraints for one payload field, keyed by its JSON name."""

    name: str
    kind: type
    required: bool = True
    checks: tuple[Check, ...] = ()

    def check(self, payload: Mapping[str, Any]) -> list[Violation]:
        """Return every violation of this rule found in ``payload``.

        ``None`` counts as absent. A value of the wrong type is reported once
        and not checked any further.
        """
        value = payload.get(self.name)
        if value is None:
            if self.required:
                return [Violation(self.name, "required")]
            return []

        if not _is_type(value, self.kind):
            return [Violation(self.name, "type", self.kind.__name__)]

        violations = []
        for check in self.checks:
            violation = check.evaluate(self.name, value)
            if violation is not None:
                violations.append(violation)
        return violations

    def optional(self) -> FieldRule:
        """Return a copy of this rule that tolerates an absent value."""
        return FieldRule(self.name, self.kind, required=False, checks=self.checks)


@dataclass
class ValidationResult:
    """Outcome of validating one payload."""

    is_valid: bool
    violations: list[Violation] = field(default_factory=list)


PRODUCT_NAME = FieldRule("productName", str, checks=(min_length(1), max_length(100)))
MAKER_NAME = FieldRule("makerName", str, checks=(min_length(1), max_length(50)))
PRICE = FieldRule("price", int, checks=(min_value(1), max_value(MAX_PRICE)))
REASON = FieldRule("reason", str, checks=(min_length(1), max_length(100)))
URL = FieldRule("url", str, checks=(valid_url(),))
ASIN = FieldRule("asin", str, checks=(exact_length(ASIN_LENGTH), alphanumeric()))

FULL_CONSTRAINTS: tuple[FieldRule, ...] = (PRODUCT_NAME, MAKER_NAME, PRICE, REASON, URL, ASIN)

# asin is write-once, so it has no place in a partial payload
PARTIAL_CONSTRAINTS: tuple[FieldRule, ...] = tuple(
    rule.optional() for rule in FULL_CONSTRAINTS if rule.name != ASIN.name
)


class ProductValidator:
    """Checks payloads against one constraint set."""

    def __init__(self, constraints: Sequence[FieldRule]) -> None:
        self._constraints = tuple(constraints)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self._constraints)

    def validate(self, payload: Any) -> ValidationResult:
        """Validate ``payload`` and collect every violated rule.

        Args:
            payload: Decoded JSON body; anything but an object is rejected outright

        Returns:
            ValidationResult listing all violations found
        """
        if not isinstance(payload, Mapping):
            return ValidationResult(is_valid=False, violations=[Violation("body", "type", "object")])

        violations: list[Violation] = []
        for rule in self._constraints:
            violations.extend(rule.check(payload))

        return ValidationResult(is_valid=not violations, violations=violations)

    def select(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Return only the keys this constraint set knows about.

        Whatever is handed on to the schemas must have gone through ``validate``.
        """
        return {name: payload[name] for name in self.fields if name in payload}


full_validator = ProductValidator(FULL_CONSTRAINTS)
partial_validator = ProductValidator(PARTIAL_CONSTRAINTS)
