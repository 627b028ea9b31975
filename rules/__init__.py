"""km-constraints rules - descriptors, evaluation and hint derivation."""

from rules.models import (
    Constraint,
    ConstraintKind,
    FieldRule,
    MaxConstraint,
    MessageTemplate,
    MinConstraint,
    NoConstraint,
    Policy,
    RangeConstraint,
    RegexConstraint,
    ValidationVerdict,
)
from rules.messages import DEFAULT_TEMPLATES, format_message
from rules.loader import load_policies, load_policy, load_templates, parse_constraint
from rules.evaluator import evaluate
from rules.hints import hint

__all__ = [
    "Constraint",
    "ConstraintKind",
    "FieldRule",
    "MaxConstraint",
    "MessageTemplate",
    "MinConstraint",
    "NoConstraint",
    "Policy",
    "RangeConstraint",
    "RegexConstraint",
    "ValidationVerdict",
    "DEFAULT_TEMPLATES",
    "format_message",
    "load_policies",
    "load_policy",
    "load_templates",
    "parse_constraint",
    "evaluate",
    "hint",
]
