"""Constraint validation routes — JSON endpoints for inline form feedback."""

from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request

from engines.key_manager import describe_fields, validate_fields
from rules.evaluator import evaluate
from rules.hints import hint
from rules.loader import load_policies, load_templates

validation_bp = Blueprint("validation", __name__)


def _templates():
    return load_templates(current_app.config.get("MESSAGES"))


def _policies():
    return load_policies(current_app.config.get("POLICIES_DIR"))


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Expected a JSON object body")
    return data


@validation_bp.errorhandler(400)
def bad_request(e):
    return jsonify({"error": e.description}), 400


@validation_bp.errorhandler(ValueError)
def bad_configuration(e):
    # Unreadable message table or policy file.
    return jsonify({"error": str(e)}), 400


@validation_bp.route("/field", methods=["POST"])
def validate_field():
    """Evaluate one value: {"value": "...", "constraint": {...}}."""
    data = _json_body()
    value = data.get("value", "")
    if not isinstance(value, str):
        value = str(value)
    verdict = evaluate(value, data.get("constraint"), templates=_templates())
    return jsonify(verdict.to_dict())


@validation_bp.route("/hint", methods=["POST"])
def constraint_hint():
    """Describe a constraint: {"constraint": {...}}."""
    data = _json_body()
    return jsonify({"hint": hint(data.get("constraint"), templates=_templates())})


@validation_bp.route("/policy/<name>", methods=["POST"])
def validate_policy(name: str):
    """Validate a whole form: {"values": {field: value, ...}}."""
    policy = _policies().get(name)
    if policy is None:
        abort(404)

    data = _json_body()
    values = data.get("values")
    if not isinstance(values, dict):
        abort(400, description="Expected 'values' to be an object")

    report = validate_fields(values, policy.rules, templates=_templates(), policy_name=policy.name)
    return jsonify(report.to_dict())


@validation_bp.route("/policy/<name>/<field_name>", methods=["POST"])
def validate_policy_field(name: str, field_name: str):
    """Validate one field of a policy on blur: {"value": "..."}."""
    policy = _policies().get(name)
    if policy is None:
        abort(404)
    rule = policy.get_rule(field_name)
    if rule is None:
        abort(404)

    data = _json_body()
    value = data.get("value", "")
    if not isinstance(value, str):
        value = str(value)
    templates = _templates()
    result = evaluate(value, rule.constraint, templates=templates).to_dict()
    result["hint"] = hint(rule.constraint, templates=templates)
    return jsonify(result)


@validation_bp.route("/policies")
def list_policies():
    """Bundled policies with per-field helper text."""
    templates = _templates()
    result = []
    for policy in _policies().values():
        hints = describe_fields(policy.rules, templates=templates)
        result.append({
            "name": policy.name,
            "description": policy.description,
            "rules": [
                {
                    "field": rule.field,
                    "label": rule.label,
                    "type": rule.constraint.kind.value if rule.constraint.kind else None,
                    "value": rule.constraint.value,
                    "hint": hints.get(rule.field, ""),
                }
                for rule in policy.rules
            ],
        })
    return jsonify(result)
