"""Validates generated OpenAPI documents for structural consistency.

Every check returns ``{location: problem}``; an empty dict means the
document is clean. Checks never raise on malformed input.
"""

from typing import Any

from api_docgen.generator.openapi import METHOD_SLOTS


def validate_envelope(doc: dict[str, Any]) -> dict[str, str]:
    """Check the top-level OpenAPI fields."""
    errors = {}
    if not str(doc.get("openapi", "")).startswith("3."):
        errors["openapi"] = f"unsupported OpenAPI version: {doc.get('openapi')!r}"
    info = doc.get("info") or {}
    if not info.get("title"):
        errors["info.title"] = "missing service title"
    if not info.get("version"):
        errors["info.version"] = "missing service version"
    return errors


def validate_paths(doc: dict[str, Any]) -> dict[str, str]:
    """Check path keys and that every operation documents a response."""
    errors = {}
    for path, item in (doc.get("paths") or {}).items():
        if not path.startswith("/"):
            errors[f"paths.{path}"] = "path must start with '/'"
        for method in METHOD_SLOTS:
            op = (item or {}).get(method)
            if op is not None and not op.get("responses"):
                errors[f"paths.{path}.{method}"] = "no responses declared"
    return errors


def validate_security(doc: dict[str, Any]) -> dict[str, str]:
    """Check that operations only reference declared security schemes."""
    declared = set(((doc.get("components") or {}).get("securitySchemes") or {}).keys())
    errors = {}
    for path, item in (doc.get("paths") or {}).items():
        for method in METHOD_SLOTS:
            op = (item or {}).get(method) or {}
            for requirement in op.get("security") or []:
                unknown = sorted(set(requirement) - declared)
                if unknown:
                    errors[f"paths.{path}.{method}.security"] = f"undeclared scheme(s): {', '.join(unknown)}"
    return errors


def validate_schemas(doc: dict[str, Any]) -> dict[str, str]:
    """Check that every ``required`` name exists in its schema's properties."""
    errors: dict[str, str] = {}
    for path, item in (doc.get("paths") or {}).items():
        for method in METHOD_SLOTS:
            op = (item or {}).get(method)
            if not op:
                continue
            where = f"paths.{path}.{method}"
            body = op.get("requestBody") or {}
            for content_type, media in (body.get("content") or {}).items():
                _check_schema(media.get("schema"), f"{where}.requestBody.{content_type}", errors)
            for phrase, response in (op.get("responses") or {}).items():
                for content_type, media in (response.get("content") or {}).items():
                    _check_schema(media.get("schema"), f"{where}.responses.{phrase}.{content_type}", errors)
    return errors


def _check_schema(schema: Any, where: str, errors: dict[str, str]) -> None:
    if not isinstance(schema, dict):
        return
    properties = schema.get("properties") or {}
    missing = [name for name in schema.get("required") or [] if name not in properties]
    if missing:
        errors[where] = f"required but not in properties: {', '.join(missing)}"
    for name, prop in properties.items():
        _check_schema(prop, f"{where}.{name}", errors)
    _check_schema(schema.get("items"), f"{where}[]", errors)
    _check_schema(schema.get("additionalProperties"), f"{where}{{}}", errors)


def validate_openapi(doc: dict[str, Any]) -> dict[str, str]:
    """Run all checks on a generated OpenAPI document (as a plain dict)."""
    errors = {}
    errors.update(validate_envelope(doc))
    errors.update(validate_paths(doc))
    errors.update(validate_security(doc))
    errors.update(validate_schemas(doc))
    return errors
