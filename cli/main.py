"""km-constraints CLI -- Click-based command-line interface.

Usage:
    kmconstraints check <value> --type MAX --max 3600
    kmconstraints check <value> --constraint '{"type": "REGEX", "value": {"pattern": "[0-9]+"}}'
    kmconstraints hint --type RANGE --min 5 --max 10
    kmconstraints validate <values_json> --policy wso2_is_token_expiry
    kmconstraints policies
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from engines.key_manager import validate_fields
from rules.evaluator import evaluate
from rules.hints import hint
from rules.loader import load_policies, load_policy, load_templates
from rules.models import ConstraintKind

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

KIND_NAMES = [k.value for k in ConstraintKind]


def _constraint_options(func):
    """Attach the shared constraint-describing options to a command."""
    options = [
        click.option("--type", "kind", type=click.Choice(KIND_NAMES, case_sensitive=False),
                     default=None, help="Constraint kind."),
        click.option("--min", "min_", default=None, help="Lower bound for MIN/RANGE."),
        click.option("--max", "max_", default=None, help="Upper bound for MAX/RANGE."),
        click.option("--pattern", default=None, help="Regular expression for REGEX."),
        click.option("--constraint", "constraint_json", default=None,
                     help='Full descriptor as JSON, e.g. \'{"type": "MIN", "value": {"min": 10}}\'.'),
        click.option("--messages", "-m", default=None,
                     help="Message file (YAML) or bundled locale name (e.g. de)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_constraint(
    kind: str | None,
    min_: str | None,
    max_: str | None,
    pattern: str | None,
    constraint_json: str | None,
) -> dict[str, Any] | None:
    """Assemble a raw descriptor from CLI options."""
    if constraint_json:
        if kind:
            raise click.BadParameter("Use either --constraint or --type, not both.")
        try:
            data = json.loads(constraint_json)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="--constraint")
        if data is not None and not isinstance(data, dict):
            raise click.BadParameter("Expected a JSON object", param_hint="--constraint")
        return data

    if kind is None:
        return None

    kind = kind.upper()
    value: dict[str, Any] = {}
    if kind in ("MIN", "RANGE"):
        if min_ is None:
            raise click.BadParameter(f"{kind} requires --min")
        value["min"] = min_
    if kind in ("MAX", "RANGE"):
        if max_ is None:
            raise click.BadParameter(f"{kind} requires --max")
        value["max"] = max_
    if kind == "REGEX":
        if pattern is None:
            raise click.BadParameter("REGEX requires --pattern")
        value["pattern"] = pattern
    return {"type": kind, "value": value}


def _load_templates_or_exit(messages: str | None):
    try:
        return load_templates(messages)
    except ValueError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"))
        sys.exit(1)


def _load_values_file(filepath: str) -> dict:
    """Load and return a {field: value} dict from a JSON file path."""
    path = Path(filepath)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        click.echo(click.style(f"Error: invalid JSON in {filepath}: {exc}", fg="red"))
        sys.exit(1)
    except OSError as exc:
        click.echo(click.style(f"Error: cannot read {filepath}: {exc}", fg="red"))
        sys.exit(1)
    if not isinstance(data, dict):
        click.echo(click.style(f"Error: {filepath} must contain a JSON object", fg="red"))
        sys.exit(1)
    return data


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version="1.0.0", prog_name="kmconstraints")
@click.option("--verbose", "-v", is_flag=True, help="Log ignored constraints and patterns.")
def cli(verbose: bool):
    """km-constraints -- key manager field constraint checker."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

@cli.command("check")
@click.argument("value")
@_constraint_options
def check_value(value: str, kind, min_, max_, pattern, constraint_json, messages):
    """Check a single VALUE against a constraint."""
    constraint = _build_constraint(kind, min_, max_, pattern, constraint_json)
    templates = _load_templates_or_exit(messages)

    verdict = evaluate(value, constraint, templates=templates)

    if verdict.valid:
        click.echo(f"{click.style('[PASS]', fg='green', bold=True)} {value!r}")
        return

    click.echo(f"{click.style('[FAIL]', fg='red', bold=True)} {value!r}")
    if verdict.message:
        click.echo(f"       {verdict.message}")
    sys.exit(1)


# ---------------------------------------------------------------------------
# hint
# ---------------------------------------------------------------------------

@cli.command("hint")
@_constraint_options
def hint_cmd(kind, min_, max_, pattern, constraint_json, messages):
    """Print the helper text for a constraint."""
    constraint = _build_constraint(kind, min_, max_, pattern, constraint_json)
    templates = _load_templates_or_exit(messages)

    text = hint(constraint, templates=templates)
    if text:
        click.echo(text)
    else:
        click.echo(click.style("No constraint imposed.", dim=True))


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

@cli.command("validate")
@click.argument("values_json_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--policy", "-p", "policy_ref", default="wso2_is_token_expiry",
              help="Bundled policy name or path to a policy YAML file.")
@click.option("--messages", "-m", default=None,
              help="Message file (YAML) or bundled locale name (e.g. de).")
def validate_cmd(values_json_file: str, policy_ref: str, messages: str | None):
    """Validate form values from a JSON file against a policy."""
    values = _load_values_file(values_json_file)
    templates = _load_templates_or_exit(messages)
    try:
        policy = load_policy(policy_ref)
    except ValueError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"))
        sys.exit(1)

    report = validate_fields(values, policy.rules, templates=templates, policy_name=policy.name)

    click.echo()
    click.echo(report.summary())
    click.echo()
    if not report.passed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# policies
# ---------------------------------------------------------------------------

@cli.command("policies")
def list_policies():
    """List bundled policies and their field rules."""
    try:
        policies = load_policies()
    except ValueError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"))
        sys.exit(1)
    if not policies:
        click.echo(click.style("No policies found.", fg="yellow"))
        return

    click.echo()
    for policy in policies.values():
        click.echo(click.style(f"  {policy.name}", bold=True) + f"  ({len(policy.rules)} rules)")
        if policy.description:
            click.echo(click.style(f"  {policy.description}", dim=True))
        click.echo(click.style(f"  {'-' * 56}", dim=True))
        for rule in policy.rules:
            click.echo(f"    {rule.field}")
            click.echo(f"      {rule.label}: {hint(rule.constraint) or '-'}")
        click.echo()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

@cli.command("web")
@click.option("--port", "-p", default=5555, type=int, help="Port to run on (default: 5555).")
def web_server(port: int):
    """Launch the validation JSON API."""
    from web.app import create_app

    app = create_app()
    url = f"http://127.0.0.1:{port}"

    click.echo(f"  Starting km-constraints API at {click.style(url, bold=True)}")
    click.echo(click.style("  Press Ctrl+C to stop.\n", dim=True))
    app.run(host="127.0.0.1", port=port, debug=True)


def main():
    cli()


if __name__ == "__main__":
    main()
