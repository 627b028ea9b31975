"""Key manager form engine — validates a set of named fields against rules."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rules.evaluator import evaluate
from rules.hints import hint
from rules.loader import parse_constraint
from rules.messages import DEFAULT_TEMPLATES, Formatter, format_message
from rules.models import FieldRule, MessageTemplate, ValidationVerdict


# ---------------------------------------------------------------------------
# ANSI color codes
# ---------------------------------------------------------------------------
_RED = "\033[91m"
_GREEN = "\033[92m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RESET = "\033[0m"

# Token expiry fields an administrator can cap per key manager.
TOKEN_EXPIRY_FIELDS: dict[str, str] = {
    "application_access_token_expiry_time": "Maximum Application Access Token Expiry Time",
    "user_access_token_expiry_time": "Maximum User Access Token Expiry Time",
    "refresh_token_expiry_time": "Maximum Refresh Token Expiry Time",
    "id_token_expiry_time": "Maximum ID Token Expiry Time",
}


def max_expiry_rules(limits: Mapping[str, Any]) -> list[FieldRule]:
    """Build MAX rules from ``{field: max_seconds}``, in TOKEN_EXPIRY_FIELDS order.

    Limits may be numbers or the text typed into the admin form.
    """
    rules: list[FieldRule] = []
    for field_name, label in TOKEN_EXPIRY_FIELDS.items():
        if field_name not in limits:
            continue
        rules.append(
            FieldRule(
                field=field_name,
                label=label,
                constraint=parse_constraint({"type": "MAX", "value": {"max": limits[field_name]}}),
            )
        )
    return rules


# ---------------------------------------------------------------------------
# FormReport
# ---------------------------------------------------------------------------
@dataclass
class FieldResult:
    """Outcome for one field of the form."""

    field: str
    label: str
    value: str | None
    verdict: ValidationVerdict
    hint: str = ""
    skipped: bool = False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "field": self.field,
            "label": self.label,
            "value": self.value,
            "hint": self.hint,
            "skipped": self.skipped,
        }
        d.update(self.verdict.to_dict())
        return d


@dataclass
class FormReport:
    """Structured report produced by running every rule against a form."""

    policy_name: str
    results: list[FieldResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return len(self.failures) == 0

    @property
    def failures(self) -> list[FieldResult]:
        return [r for r in self.results if not r.verdict.valid]

    @property
    def skipped(self) -> list[FieldResult]:
        return [r for r in self.results if r.skipped]

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy": self.policy_name,
            "passed": self.passed,
            "results": [r.to_dict() for r in self.results],
        }

    def summary(self) -> str:
        """Return a human-readable, ANSI-colored summary of the report."""
        lines: list[str] = []

        status = f"{_GREEN}PASSED{_RESET}" if self.passed else f"{_RED}FAILED{_RESET}"
        lines.append(f"{_BOLD}Constraint Report: {self.policy_name}{_RESET}  [{status}]")
        lines.append(f"{_DIM}{'=' * 60}{_RESET}")

        total = len(self.results)
        fail_count = len(self.failures)
        skip_count = len(self.skipped)
        lines.append(
            f"  Fields: {total}  |  "
            f"Passed: {_GREEN}{total - fail_count - skip_count}{_RESET}  |  "
            f"Failed: {_RED}{fail_count}{_RESET}  |  "
            f"Skipped: {_DIM}{skip_count}{_RESET}"
        )
        lines.append("")

        for r in self.results:
            if r.skipped:
                lines.append(f"  {_DIM}[SKIP]{_RESET} {r.label}")
                continue
            if r.verdict.valid:
                lines.append(f"  {_GREEN}[PASS]{_RESET} {r.label} = {r.value}")
                continue
            lines.append(f"  {_RED}[FAIL]{_RESET} {r.label} = {r.value!r}")
            # MIN/MAX give no message for non-numeric input; show the hint instead.
            lines.append(f"         {r.verdict.message or r.hint or 'Invalid value'}")

        lines.append(f"{_DIM}{'=' * 60}{_RESET}")
        if self.passed:
            lines.append(f"{_GREEN}{_BOLD}All fields satisfy their constraints.{_RESET}")
        else:
            lines.append(f"{_RED}{_BOLD}{fail_count} field(s) violate their constraints.{_RESET}")

        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_fields(
    values: Mapping[str, Any],
    rules: list[FieldRule],
    formatter: Formatter = format_message,
    templates: Mapping[str, MessageTemplate] = DEFAULT_TEMPLATES,
    policy_name: str = "form",
) -> FormReport:
    """Evaluate every rule against the submitted *values*.

    Fields the form did not submit are recorded as skipped and count as
    passed.  Non-string values are converted with ``str()`` first, as a
    browser would hand over the input's text.
    """
    report = FormReport(policy_name=policy_name)

    for rule in rules:
        field_hint = hint(rule.constraint, formatter, templates)
        raw = values.get(rule.field)
        if raw is None:
            report.results.append(
                FieldResult(
                    field=rule.field,
                    label=rule.label,
                    value=None,
                    verdict=ValidationVerdict(valid=True),
                    hint=field_hint,
                    skipped=True,
                )
            )
            continue

        text = raw if isinstance(raw, str) else str(raw)
        report.results.append(
            FieldResult(
                field=rule.field,
                label=rule.label,
                value=text,
                verdict=evaluate(text, rule.constraint, formatter, templates),
                hint=field_hint,
            )
        )

    return report


def describe_fields(
    rules: list[FieldRule],
    formatter: Formatter = format_message,
    templates: Mapping[str, MessageTemplate] = DEFAULT_TEMPLATES,
) -> dict[str, str]:
    """Helper text for each field that has a constraint."""
    hints: dict[str, str] = {}
    for rule in rules:
        text = hint(rule.constraint, formatter, templates)
        if text:
            hints[rule.field] = text
    return hints
