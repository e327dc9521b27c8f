"""Internal API description.

A flat, simplified sibling of the OpenAPI document.

One entry per registered endpoint, in registration order; no path merging
and no security scheme catalog.
"""

from api_docgen.generator.base import APIDescription, APIEndpoint, RequestBodySchema, ResponseSchema
from api_docgen.generator.status import status_phrase
from api_docgen.registry import EndpointRecord, EndpointRegistry
from api_docgen.schema.reflector import SchemaReflector

JSON_CONTENT = "application/json"
TEXT_CONTENT = "text/plain"


def generate_api_description(registry: EndpointRegistry, reflector: SchemaReflector | None = None) -> APIDescription:
    reflector = reflector or SchemaReflector()
    info, endpoints = registry.snapshot()
    return APIDescription(
        service_name=info.title,
        version=info.version,
        base_url=info.base_url,
        endpoints=[_describe_endpoint(endpoint, reflector) for endpoint in endpoints],
    )


def _describe_endpoint(endpoint: EndpointRecord, reflector: SchemaReflector) -> APIEndpoint:
    api_endpoint = APIEndpoint(
        method=endpoint.method,
        path=endpoint.path,
        summary=endpoint.summary,
        description=endpoint.description,
        tags=list(endpoint.tags) or None,
    )

    if endpoint.request_body is not None:
        api_endpoint.request_body = RequestBodySchema(
            content_type=JSON_CONTENT,
            schema_=reflector.reflect(endpoint.request_body),
            required=True,
        )

    for status_code, response_type in endpoint.responses.items():
        phrase = status_phrase(status_code)
        response = ResponseSchema(description=phrase, content_type=JSON_CONTENT)
        if isinstance(response_type, str):
            response.description = response_type
            response.content_type = TEXT_CONTENT
        elif response_type is not None:
            response.schema_ = reflector.reflect(response_type)
        api_endpoint.responses[phrase] = response

    return api_endpoint
