"""Evaluate a raw input value against a constraint descriptor."""

from __future__ import annotations

import logging
import re
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
    ValidationVerdict,
)
from rules.numeric import parse_number

logger = logging.getLogger(__name__)

_VALID = ValidationVerdict(valid=True)


def evaluate(
    raw_value: str,
    constraint: Any,
    formatter: Formatter = format_message,
    templates: Mapping[str, MessageTemplate] = DEFAULT_TEMPLATES,
) -> ValidationVerdict:
    """Decide whether *raw_value* satisfies *constraint*.

    *constraint* may be a descriptor, a raw ``{"type", "value"}`` mapping or
    None.  Missing or unknown constraints, and patterns that fail to compile,
    always yield a valid verdict.  MIN and MAX report an unparseable value
    as invalid without a message; RANGE uses its usual message for it.
    """
    constraint = parse_constraint(constraint)

    if isinstance(constraint, MinConstraint):
        number = parse_number(raw_value)
        if number is None:
            return ValidationVerdict(valid=False)
        if number >= constraint.min:
            return _VALID
        return ValidationVerdict(
            valid=False,
            message=formatter(templates.get("rangeMin"), {"min": constraint.min}),
        )

    if isinstance(constraint, MaxConstraint):
        number = parse_number(raw_value)
        if number is None:
            return ValidationVerdict(valid=False)
        if number <= constraint.max:
            return _VALID
        return ValidationVerdict(
            valid=False,
            message=formatter(templates.get("rangeMax"), {"max": constraint.max}),
        )

    if isinstance(constraint, RangeConstraint):
        number = parse_number(raw_value)
        if number is not None and constraint.min <= number <= constraint.max:
            return _VALID
        return ValidationVerdict(
            valid=False,
            message=formatter(
                templates.get("rangeInvalid"),
                {"min": constraint.min, "max": constraint.max},
            ),
        )

    if isinstance(constraint, RegexConstraint):
        try:
            compiled = re.compile(constraint.pattern)
        except (re.error, OverflowError, RecursionError) as exc:
            logger.debug("Skipping malformed pattern %r: %s", constraint.pattern, exc)
            return _VALID
        if isinstance(raw_value, str) and compiled.fullmatch(raw_value):
            return _VALID
        return ValidationVerdict(
            valid=False,
            message=formatter(templates.get("regexInvalid"), {"pattern": constraint.pattern}),
        )

    return _VALID
