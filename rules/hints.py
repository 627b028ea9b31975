"""Describe what a constraint requires, independent of any value."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rules.loader import parse_constraint
from rules.messages import DEFAULT_TEMPLATES, Formatter, format_message
from rules.models import (
    MaxConstraint,
    MessageTemplate,
    MinConstraint,
    RangeConstraint,
    RegexConstraint,
)


def hint(
    constraint: Any,
    formatter: Formatter = format_message,
    templates: Mapping[str, MessageTemplate] = DEFAULT_TEMPLATES,
) -> str:
    """Return helper text for *constraint*, or '' when nothing is imposed."""
    constraint = parse_constraint(constraint)

    if isinstance(constraint, MinConstraint):
        return formatter(templates.get("rangeMin"), {"min": constraint.min})
    if isinstance(constraint, MaxConstraint):
        return formatter(templates.get("rangeMax"), {"max": constraint.max})
    if isinstance(constraint, RangeConstraint):
        return formatter(
            templates.get("rangeInvalid"),
            {"min": constraint.min, "max": constraint.max},
        )
    if isinstance(constraint, RegexConstraint):
        return formatter(templates.get("regexInvalid"), {"pattern": constraint.pattern})
    return ""
