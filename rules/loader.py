"""Parse constraint descriptors and load policies and message tables."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from rules.messages import DEFAULT_TEMPLATES, TEMPLATE_KEYS, build_templates
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
)
from rules.numeric import parse_number

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
POLICIES_DIR = Path(os.environ.get("KMCONSTRAINTS_POLICIES_DIR", PROJECT_ROOT / "policies"))
MESSAGES_DIR = PROJECT_ROOT / "messages"

_DESCRIPTOR_TYPES = (MinConstraint, MaxConstraint, RangeConstraint, RegexConstraint, NoConstraint)


def _parse_bound(value: Any) -> float | None:
    """Bounds come as numbers from YAML/JSON or as text from admin forms.

    Integral bounds are kept as ints so they render as "10", not "10.0".
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value if math.isfinite(value) else None
    else:
        number = parse_number(value)
    if number is not None and number.is_integer():
        return int(number)
    return number


def _kind_of(raw_type: Any) -> ConstraintKind | None:
    if isinstance(raw_type, ConstraintKind):
        return raw_type
    if not isinstance(raw_type, str):
        return None
    try:
        return ConstraintKind(raw_type.strip().upper())
    except ValueError:
        return None


def parse_constraint(raw: Any) -> Constraint:
    """Turn a ``{"type": ..., "value": {...}}`` mapping into a descriptor.

    Anything that cannot be understood becomes NoConstraint so that a bad
    definition never blocks input.
    """
    if isinstance(raw, _DESCRIPTOR_TYPES):
        return raw
    if raw is None:
        return NoConstraint()
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring constraint of unexpected shape: %r", raw)
        return NoConstraint()

    kind = _kind_of(raw.get("type"))
    if kind is None:
        if raw.get("type") is not None:
            logger.warning("Ignoring constraint with unknown type %r", raw.get("type"))
        return NoConstraint()

    value = raw.get("value")
    if not isinstance(value, Mapping):
        logger.warning("Ignoring %s constraint without a value", kind.value)
        return NoConstraint()

    if kind == ConstraintKind.REGEX:
        pattern = value.get("pattern")
        if not isinstance(pattern, str):
            logger.warning("Ignoring REGEX constraint with non-string pattern %r", pattern)
            return NoConstraint()
        return RegexConstraint(pattern=pattern)

    lo = _parse_bound(value.get("min")) if kind in (ConstraintKind.MIN, ConstraintKind.RANGE) else None
    hi = _parse_bound(value.get("max")) if kind in (ConstraintKind.MAX, ConstraintKind.RANGE) else None

    if kind == ConstraintKind.MIN and lo is not None:
        return MinConstraint(min=lo)
    if kind == ConstraintKind.MAX and hi is not None:
        return MaxConstraint(max=hi)
    if kind == ConstraintKind.RANGE and lo is not None and hi is not None:
        return RangeConstraint(min=lo, max=hi)

    logger.warning("Ignoring %s constraint with unusable bounds: %r", kind.value, dict(value))
    return NoConstraint()


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

def _policy_from_data(data: Mapping[str, Any], default_name: str) -> Policy:
    rules: list[FieldRule] = []
    for rule in data.get("rules") or []:
        if not isinstance(rule, Mapping) or "field" not in rule:
            raise ValueError(f"Rule without a field in policy {default_name!r}: {rule!r}")
        rules.append(
            FieldRule(
                field=rule["field"],
                label=rule.get("label", rule["field"]),
                constraint=parse_constraint(rule),
            )
        )
    return Policy(
        name=data.get("name", default_name),
        description=data.get("description", ""),
        rules=rules,
    )


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc}") from exc


def load_policies(directory: Path | None = None) -> dict[str, Policy]:
    """Load every policy YAML file in *directory*. Returns {name: Policy}."""
    directory = Path(directory) if directory is not None else POLICIES_DIR
    policies: dict[str, Policy] = {}
    if not directory.exists():
        return policies
    for filepath in sorted(directory.glob("*.yaml")):
        data = _read_yaml(filepath)
        if not isinstance(data, Mapping) or "rules" not in data:
            continue
        policy = _policy_from_data(data, filepath.stem)
        policies[policy.name] = policy
    return policies


def load_policy(name_or_path: str | Path, directory: Path | None = None) -> Policy:
    """Load a policy by bundled name or from an explicit YAML file path."""
    path = Path(name_or_path)
    if path.suffix in (".yaml", ".yml") and path.exists():
        data = _read_yaml(path)
        if not isinstance(data, Mapping):
            raise ValueError(f"Policy file {path} does not contain a mapping")
        return _policy_from_data(data, path.stem)

    policies = load_policies(directory)
    policy = policies.get(str(name_or_path))
    if policy is None:
        raise ValueError(f"Unknown policy: {name_or_path!r}")
    return policy


# ---------------------------------------------------------------------------
# Message tables
# ---------------------------------------------------------------------------

def load_templates(path: str | Path | None = None) -> Mapping[str, MessageTemplate]:
    """Load a message table from YAML, falling back to English per key.

    *path* may also be a bundled locale name such as ``"de"``.
    """
    if path is None:
        return DEFAULT_TEMPLATES
    path = Path(path)
    if not path.exists():
        bundled = MESSAGES_DIR / f"{path.name}.yaml"
        if not bundled.exists():
            raise ValueError(f"Message file not found: {path}")
        path = bundled
    data = _read_yaml(path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Message file {path} does not contain a mapping")
    unknown = sorted(set(data) - set(TEMPLATE_KEYS))
    if unknown:
        raise ValueError(f"Unknown message keys in {path}: {', '.join(map(str, unknown))}")
    templates = dict(DEFAULT_TEMPLATES)
    templates.update(build_templates(data))
    return templates
