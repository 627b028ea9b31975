"""Message templates and the default placeholder formatter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional

from rules.models import MessageTemplate
from rules.numeric import format_number

# (template, substitutions) -> message
Formatter = Callable[[Any, Optional[Mapping[str, Any]]], str]

TEMPLATE_KEYS = ("rangeMin", "rangeMax", "rangeInvalid", "regexInvalid")

DEFAULT_TEMPLATES: Mapping[str, MessageTemplate] = {
    "rangeMin": MessageTemplate(
        id="constraints.rangeMin",
        default_message="Value must be at least {min}",
    ),
    "rangeMax": MessageTemplate(
        id="constraints.rangeMax",
        default_message="Value must be at most {max}",
    ),
    "rangeInvalid": MessageTemplate(
        id="constraints.rangeInvalid",
        default_message="Value must be a number between {min} and {max}",
    ),
    "regexInvalid": MessageTemplate(
        id="constraints.regexInvalid",
        default_message="Value must match the required pattern: {pattern}",
    ),
}


def _template_text(template: Any) -> str:
    """Pull the message string out of whatever the template table holds."""
    if template is None:
        raise ValueError("No message template supplied")
    if isinstance(template, MessageTemplate):
        return template.default_message
    if isinstance(template, str):
        return template
    if isinstance(template, Mapping):
        for key in ("defaultMessage", "default_message"):
            if key in template:
                return str(template[key])
    raise ValueError(f"Cannot read message text from template: {template!r}")


def format_message(template: Any, substitutions: Mapping[str, Any] | None = None) -> str:
    """Fill every ``{name}`` in *template* from *substitutions*.

    Placeholders without a substitution are left untouched.
    """
    message = _template_text(template)
    if substitutions:
        for name, value in substitutions.items():
            rendered = value if isinstance(value, str) else format_number(value)
            message = message.replace("{" + name + "}", rendered)
    return message


def build_templates(raw: Mapping[str, Any]) -> dict[str, MessageTemplate]:
    """Build a template table from ``{key: text}`` or ``{key: {defaultMessage: text}}``."""
    table: dict[str, MessageTemplate] = {}
    for key, entry in raw.items():
        if isinstance(entry, MessageTemplate):
            table[key] = entry
            continue
        table[key] = MessageTemplate(
            id=f"constraints.{key}",
            default_message=_template_text(entry),
        )
    return table
