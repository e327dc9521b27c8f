"""Models for the generated documents.

Two projections of the registry share these: the OpenAPI 3.0 document and
the simplified internal API description. Both serialize through
:meth:`Document.to_dict`, which uses the wire aliases and drops unset
optional fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JsonSchema = dict[str, Any]


class Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent, by_alias=True, exclude_none=True)


# OpenAPI 3.0


class OpenAPIInfo(Document):
    title: str
    description: str | None = None
    version: str


class OpenAPIServer(Document):
    url: str
    description: str | None = None


class MediaType(Document):
    schema_: JsonSchema = Field(alias="schema")


class RequestBody(Document):
    description: str | None = None
    required: bool | None = None
    content: dict[str, MediaType]


class Response(Document):
    description: str
    content: dict[str, MediaType] | None = None


class Operation(Document):
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    operation_id: str | None = Field(default=None, alias="operationId")
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}
    security: list[dict[str, list[str]]] | None = None


class PathItem(Document):
    get: Operation | None = None
    post: Operation | None = None
    put: Operation | None = None
    delete: Operation | None = None
    patch: Operation | None = None


class SecurityScheme(Document):
    type: str  # http / apiKey / oauth2 / openIdConnect / mutualTLS
    scheme: str | None = None
    description: str | None = None


class OpenAPIComponents(Document):
    schemas: dict[str, JsonSchema] = {}
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict, alias="securitySchemes")


class OpenAPIDocument(Document):
    openapi: str
    info: OpenAPIInfo
    servers: list[OpenAPIServer] | None = None
    paths: dict[str, PathItem] = {}
    components: OpenAPIComponents | None = None


# Internal API description


class RequestBodySchema(Document):
    content_type: str
    schema_: JsonSchema = Field(alias="schema")
    required: bool


class ResponseSchema(Document):
    description: str
    content_type: str
    schema_: JsonSchema | None = Field(default=None, alias="schema")


class APIEndpoint(Document):
    method: str
    path: str
    summary: str
    description: str
    request_body: RequestBodySchema | None = None
    responses: dict[str, ResponseSchema] = {}
    tags: list[str] | None = None


class APIDescription(Document):
    service_name: str
    version: str
    base_url: str
    endpoints: list[APIEndpoint] = []
