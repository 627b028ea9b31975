"""Data models for km-constraints."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union


class ConstraintKind(enum.Enum):
    MIN = "MIN"
    MAX = "MAX"
    RANGE = "RANGE"
    REGEX = "REGEX"


@dataclass(frozen=True)
class MinConstraint:
    """Value must be at least ``min``."""

    min: float

    @property
    def kind(self) -> ConstraintKind:
        return ConstraintKind.MIN

    @property
    def value(self) -> dict[str, Any]:
        return {"min": self.min}


@dataclass(frozen=True)
class MaxConstraint:
    """Value must be at most ``max``."""

    max: float

    @property
    def kind(self) -> ConstraintKind:
        return ConstraintKind.MAX

    @property
    def value(self) -> dict[str, Any]:
        return {"max": self.max}


@dataclass(frozen=True)
class RangeConstraint:
    """Value must lie between ``min`` and ``max``, both inclusive."""

    min: float
    max: float

    @property
    def kind(self) -> ConstraintKind:
        return ConstraintKind.RANGE

    @property
    def value(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class RegexConstraint:
    """Whole value must match ``pattern`` (source string, not compiled)."""

    pattern: str

    @property
    def kind(self) -> ConstraintKind:
        return ConstraintKind.REGEX

    @property
    def value(self) -> dict[str, Any]:
        return {"pattern": self.pattern}


@dataclass(frozen=True)
class NoConstraint:
    """Nothing imposed. Absent, unknown and unusable descriptors end up here."""

    @property
    def kind(self) -> None:
        return None

    @property
    def value(self) -> None:
        return None


Constraint = Union[MinConstraint, MaxConstraint, RangeConstraint, RegexConstraint, NoConstraint]


@dataclass(frozen=True)
class ValidationVerdict:
    """Result of evaluating one value against one constraint."""

    valid: bool
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"valid": self.valid}
        if self.message is not None:
            d["message"] = self.message
        return d


@dataclass(frozen=True)
class MessageTemplate:
    """A localized message with named ``{placeholder}`` slots."""

    id: str
    default_message: str


@dataclass(frozen=True)
class FieldRule:
    """A named form field and the constraint its input must satisfy."""

    field: str
    label: str
    constraint: Constraint


@dataclass
class Policy:
    """A named set of field rules loaded from YAML."""

    name: str
    description: str = ""
    rules: list[FieldRule] = field(default_factory=list)

    def get_rule(self, field_name: str) -> FieldRule | None:
        for rule in self.rules:
            if rule.field == field_name:
                return rule
        return None
