"""Service manifests and registry loading.

A manifest is a YAML (or JSON) file describing a service without touching
its code::

    service:
      title: Certificates
      version: 1.2.0
      base_url: https://certs.internal
    endpoints:
      - method: POST
        path: /certificates
        summary: Issue a certificate
        tags: [certificates]
        request_body: certs.models:IssueRequest
        responses:
          201: {schema: "certs.models:Certificate"}
          400: Invalid request
        security: [mTLS]

Type references use ``package.module:Name``. A plain string response is a
description; ``{schema: ref}`` is reflected.
"""

import importlib
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from api_docgen.registry import EndpointRecord, EndpointRegistry

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")


class ManifestError(ValueError):
    """Raised when a manifest or registry reference cannot be loaded."""


def import_object(ref: str) -> Any:
    """Import ``package.module:attr.path`` and return the attribute."""
    module_name, sep, attr_path = str(ref).partition(":")
    if not sep or not module_name or not attr_path:
        raise ManifestError(f"invalid reference {ref!r}, expected 'package.module:Name'")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise ManifestError(f"cannot import module {module_name!r}: {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ManifestError(f"{module_name!r} has no attribute {attr_path!r}") from e
    return obj


def load_manifest(file_path: Path) -> EndpointRegistry:
    """Build a registry from a manifest file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestError(f"{file_path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{file_path}: manifest must be a mapping")

    registry = EndpointRegistry()
    service = data.get("service") or {}
    if not isinstance(service, dict):
        raise ManifestError(f"{file_path}: 'service' must be a mapping")
    registry.set_service_info(
        title=_text(service, "title", f"{file_path}: service"),
        version=_text(service, "version", f"{file_path}: service"),
        description=_text(service, "description", f"{file_path}: service"),
        base_url=_text(service, "base_url", f"{file_path}: service"),
    )

    for index, entry in enumerate(data.get("endpoints") or []):
        registry.register_endpoint(_parse_endpoint(entry, index))

    logger.info("loaded %d endpoints from %s", len(registry), file_path)
    return registry


def load_registry(source: str) -> EndpointRegistry:
    """Load a registry from a manifest path or a ``module:attribute`` reference.

    The attribute may be an :class:`EndpointRegistry` or a zero-argument
    callable returning one.
    """
    path = Path(source)
    if path.suffix.lower() in MANIFEST_SUFFIXES:
        if not path.is_file():
            raise ManifestError(f"manifest not found: {path}")
        return load_manifest(path)

    obj = import_object(source)
    if callable(obj) and not isinstance(obj, (EndpointRegistry, type)):
        obj = obj()
    if not isinstance(obj, EndpointRegistry):
        raise ManifestError(f"{source!r} is not an EndpointRegistry")
    return obj


def _text(section: dict, key: str, where: str) -> str:
    """Read an optional string field; null reads as empty."""
    # Unquoted YAML scalars such as `version: 1.10` arrive as floats.
    value = section.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ManifestError(f"{where}: {key!r} must be a string, got {value!r}; quote it")
    return value


def _parse_endpoint(entry: Any, index: int) -> EndpointRecord:
    if not isinstance(entry, dict) or "method" not in entry or "path" not in entry:
        raise ManifestError(f"endpoint #{index}: 'method' and 'path' are required")

    request_body = entry.get("request_body")
    if request_body is not None:
        request_body = import_object(request_body)

    responses = {}
    for code, value in (entry.get("responses") or {}).items():
        try:
            status_code = int(code)
        except (TypeError, ValueError) as e:
            raise ManifestError(f"endpoint #{index}: invalid status code {code!r}") from e
        responses[status_code] = _parse_response(value, index)

    try:
        return EndpointRecord(
            method=str(entry["method"]),
            path=str(entry["path"]),
            summary=_text(entry, "summary", f"endpoint #{index}"),
            description=_text(entry, "description", f"endpoint #{index}"),
            tags=entry.get("tags") or (),
            request_body=request_body,
            responses=responses,
            security=entry.get("security") or (),
            operation_id=_text(entry, "operation_id", f"endpoint #{index}"),
        )
    except ValidationError as e:
        raise ManifestError(f"endpoint #{index}: {e}") from e


def _parse_response(value: Any, index: int) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        if "schema" in value:
            return import_object(value["schema"])
        if "description" in value:
            return str(value["description"])
    raise ManifestError(f"endpoint #{index}: response must be a string or {{schema: ref}}")
