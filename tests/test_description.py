import json

from api_docgen.generator.description import generate_api_description
from api_docgen.registry import EndpointRecord, EndpointRegistry
from api_docgen.schema.base import Primitive, Record
from api_docgen.schema.reflector import reflect

ACCOUNT = Record("Account").add("id", Primitive("int64"), tag="required").add("email", str, tag="format=email")


def _registry(*records: EndpointRecord) -> EndpointRegistry:
    registry = EndpointRegistry()
    registry.set_service_info("Accounts", "0.3.0", "Account service", "http://accounts:8080")
    for rec in records:
        registry.register_endpoint(rec)
    return registry


class TestGenerateApiDescription:
    def test_empty_registry(self):
        desc = generate_api_description(EndpointRegistry()).to_dict()
        assert desc == {"service_name": "", "version": "", "base_url": "", "endpoints": []}

    def test_envelope(self):
        desc = generate_api_description(_registry()).to_dict()
        assert desc["service_name"] == "Accounts"
        assert desc["version"] == "0.3.0"
        assert desc["base_url"] == "http://accounts:8080"

    def test_endpoint_fields(self):
        reg = _registry(
            EndpointRecord(
                method="POST",
                path="/accounts",
                summary="Open account",
                tags=("accounts",),
                request_body=ACCOUNT,
                responses={201: ACCOUNT, 409: "Already exists"},
            )
        )
        (endpoint,) = generate_api_description(reg).to_dict()["endpoints"]

        assert endpoint["method"] == "POST"
        assert endpoint["path"] == "/accounts"
        assert endpoint["summary"] == "Open account"
        assert endpoint["description"] == ""
        assert endpoint["tags"] == ["accounts"]
        assert endpoint["request_body"] == {
            "content_type": "application/json",
            "schema": reflect(ACCOUNT),
            "required": True,
        }
        assert endpoint["responses"]["Created"] == {
            "description": "Created",
            "content_type": "application/json",
            "schema": reflect(ACCOUNT),
        }
        assert endpoint["responses"]["Conflict"] == {
            "description": "Already exists",
            "content_type": "text/plain",
        }

    def test_no_path_merging(self):
        reg = _registry(
            EndpointRecord(method="GET", path="/accounts", summary="a"),
            EndpointRecord(method="GET", path="/accounts", summary="b"),
            EndpointRecord(method="OPTIONS", path="/accounts", summary="c"),
        )
        endpoints = generate_api_description(reg).to_dict()["endpoints"]
        assert [e["summary"] for e in endpoints] == ["a", "b", "c"]

    def test_unknown_status_fallback(self):
        reg = _registry(EndpointRecord(method="GET", path="/x", responses={299: None}))
        (endpoint,) = generate_api_description(reg).to_dict()["endpoints"]
        assert endpoint["responses"] == {
            "Response": {"description": "Response", "content_type": "application/json"}
        }
        assert "request_body" not in endpoint
        assert "tags" not in endpoint

    def test_json_serializable(self):
        reg = _registry(EndpointRecord(method="GET", path="/x", responses={200: ACCOUNT}))
        data = json.loads(generate_api_description(reg).to_json())
        assert data["endpoints"][0]["responses"]["OK"]["schema"]["required"] == ["id"]
