"""OpenAPI 3.0 document assembler."""

import logging

from api_docgen.generator.base import (
    MediaType,
    OpenAPIComponents,
    OpenAPIDocument,
    OpenAPIInfo,
    OpenAPIServer,
    Operation,
    PathItem,
    RequestBody,
    Response,
    SecurityScheme,
)
from api_docgen.generator.status import status_phrase
from api_docgen.registry import EndpointRecord, EndpointRegistry
from api_docgen.schema.reflector import SchemaReflector

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"
JSON_CONTENT = "application/json"
METHOD_SLOTS = ("get", "post", "put", "delete", "patch")


def default_security_schemes() -> dict[str, SecurityScheme]:
    return {
        "mTLS": SecurityScheme(
            type="mutualTLS",
            description="Mutual TLS authentication with client certificates",
        ),
        "Bearer": SecurityScheme(
            type="http",
            scheme="bearer",
            description="JWT Bearer token authentication",
        ),
    }


def generate_openapi(registry: EndpointRegistry, reflector: SchemaReflector | None = None) -> OpenAPIDocument:
    """Build an OpenAPI 3.0 document from everything registered so far.

    Endpoints sharing a path are merged into one path item; a later
    registration for the same path and method replaces the earlier one.
    Methods other than GET/POST/PUT/DELETE/PATCH are skipped.
    """
    reflector = reflector or SchemaReflector()
    info, endpoints = registry.snapshot()

    paths: dict[str, PathItem] = {}
    for endpoint in endpoints:
        slot = endpoint.method.lower()
        if slot not in METHOD_SLOTS:
            logger.debug("skipping %s %s: unsupported method", endpoint.method, endpoint.path)
            continue
        path_item = paths.setdefault(endpoint.path, PathItem())
        setattr(path_item, slot, build_operation(endpoint, reflector))

    return OpenAPIDocument(
        openapi=OPENAPI_VERSION,
        info=OpenAPIInfo(
            title=info.title,
            description=info.description or None,
            version=info.version,
        ),
        servers=[OpenAPIServer(url=info.base_url)],
        paths=paths,
        components=OpenAPIComponents(schemas={}, security_schemes=default_security_schemes()),
    )


def build_operation(endpoint: EndpointRecord, reflector: SchemaReflector) -> Operation:
    op = Operation(
        summary=endpoint.summary or None,
        description=endpoint.description or None,
        tags=list(endpoint.tags) or None,
        operation_id=endpoint.operation_id or None,
    )

    if endpoint.request_body is not None:
        op.request_body = RequestBody(
            required=True,
            content={JSON_CONTENT: MediaType(schema_=reflector.reflect(endpoint.request_body))},
        )

    for status_code, response_type in endpoint.responses.items():
        response = Response(description=status_phrase(status_code))
        if isinstance(response_type, str):
            response.description = response_type
        elif response_type is not None:
            response.content = {JSON_CONTENT: MediaType(schema_=reflector.reflect(response_type))}
        op.responses[status_phrase(status_code)] = response

    if endpoint.security:
        op.security = [{scheme: []} for scheme in endpoint.security]

    return op
