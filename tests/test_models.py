from api_docgen.generator.base import APIEndpoint, MediaType, Operation, RequestBodySchema, Response, ResponseSchema
from api_docgen.schema.base import Primitive, Record, wire_name_of


class TestWireName:
    def test_default_is_field_name(self):
        assert wire_name_of("user_id", None) == "user_id"

    def test_modifiers_dropped(self):
        assert wire_name_of("user_id", "userId,omitempty") == "userId"

    def test_suppressed(self):
        assert wire_name_of("secret", "-") is None
        assert wire_name_of("secret", "") is None

    def test_empty_first_segment_keeps_name(self):
        assert wire_name_of("count", ",omitempty") == "count"


class TestDescriptors:
    def test_primitive_json_type(self):
        assert Primitive("INT32").json_type() == "integer"
        assert Primitive("uintptr").json_type() is None

    def test_record_identity(self):
        assert Record("A") != Record("A")
        rec = Record("A").add("x", int, tag="required")
        assert rec.fields[0].tag == "required"


class TestDocumentModels:
    def test_schema_alias(self):
        media = MediaType(schema_={"type": "string"})
        assert media.to_dict() == {"schema": {"type": "string"}}

    def test_operation_aliases_and_omission(self):
        op = Operation(operation_id="getThing", responses={"OK": Response(description="OK")})
        assert op.to_dict() == {"operationId": "getThing", "responses": {"OK": {"description": "OK"}}}

    def test_endpoint_keeps_empty_strings(self):
        ep = APIEndpoint(method="GET", path="/x", summary="", description="")
        assert ep.to_dict() == {"method": "GET", "path": "/x", "summary": "", "description": "", "responses": {}}

    def test_response_schema_optional(self):
        resp = ResponseSchema(description="Deleted", content_type="text/plain")
        assert resp.to_dict() == {"description": "Deleted", "content_type": "text/plain"}

    def test_body_models_carry_only_reflected_shape(self):
        assert "example" not in MediaType.model_fields
        assert "example" not in RequestBodySchema.model_fields
        assert "example" not in ResponseSchema.model_fields
