import pytest
from pydantic import ValidationError

from spec2llms.parser.base import API, Endpoint, MediaType, Parameter, Schema, Tag


class TestParameter:
    def test_create_required_param(self):
        p = Parameter(name="id", location="path", required=True, type="integer")
        assert p.name == "id"
        assert p.required is True
        assert p.description == ""
        assert p.enum == []
        assert p.example is None

    def test_location_accepts_openapi_alias(self):
        p = Parameter.model_validate({"name": "limit", "in": "query"})
        assert p.location == "query"
        assert p.type == "string"


class TestEndpoint:
    def test_create_minimal_endpoint(self):
        ep = Endpoint(method="GET", path="/api/users")
        assert ep.parameters == []
        assert ep.request_body is None
        assert ep.responses == {}
        assert ep.deprecated is False

    def test_models_are_frozen(self):
        ep = Endpoint(method="GET", path="/api/users")
        with pytest.raises(ValidationError):
            ep.path = "/other"

    def test_endpoint_serialization_roundtrip(self):
        ep = Endpoint(
            method="DELETE",
            path="/api/users/{id}",
            summary="Delete user",
            parameters=[Parameter(name="id", location="path", required=True, type="integer")],
            tags=["users"],
        )
        ep2 = Endpoint(**ep.model_dump())
        assert ep2.path == "/api/users/{id}"
        assert ep2.parameters[0].location == "path"


class TestSchema:
    def test_nested_schema(self):
        schema = Schema(
            type="object",
            properties={"tags": Schema(type="array", items=Schema(type="string"))},
        )
        assert schema.properties["tags"].items.type == "string"

    def test_media_type_schema_alias(self):
        media = MediaType(schema=Schema(type="string"))
        assert media.schema_.type == "string"


class TestApi:
    def test_tag_description(self):
        api = API(tags=[Tag(name="users", description="User operations")])
        assert api.tag_description("users") == "User operations"
        assert api.tag_description("orders") == ""
