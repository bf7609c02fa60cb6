"""Data models for a parsed OpenAPI description.

The OpenAPI loader converts its input into these models; the renderer and
composer only ever read them. Every model is frozen so a parsed API can be
shared freely between generation steps.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Schema(_Frozen):
    """A JSON-Schema-like type descriptor, already dereferenced and flattened."""

    type: str = ""  # string / integer / number / boolean / array / object / ""
    format: str = ""
    description: str = ""
    properties: dict[str, "Schema"] = {}
    items: "Schema | None" = None
    required: list[str] = []
    enum: list[str] = []
    example: Any = None
    ref: str = ""  # original $ref, informational only


class Tag(_Frozen):
    name: str
    description: str = ""


class Parameter(_Frozen):
    """A single operation parameter (query, path, header, or cookie)."""

    name: str
    location: str = Field("query", alias="in")  # query / path / header / cookie
    description: str = ""
    required: bool = False
    type: str = "string"
    format: str = ""
    enum: list[str] = []
    default: Any = None
    example: Any = None


class MediaType(_Frozen):
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None


class RequestBody(_Frozen):
    description: str = ""
    required: bool = False
    content: dict[str, MediaType] = {}  # {media_type: MediaType}


class Response(_Frozen):
    description: str = ""
    content: dict[str, MediaType] = {}


class Endpoint(_Frozen):
    """One HTTP method + path combination with all its metadata."""

    method: str  # GET / POST / PUT / PATCH / DELETE / ...
    path: str  # /api/users/{id}
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    parameters: list[Parameter] = []
    request_body: RequestBody | None = None
    responses: dict[str, Response] = {}  # {status_code: Response}
    deprecated: bool = False


class SecurityScheme(_Frozen):
    """An authentication mechanism declared under components.securitySchemes."""

    name: str
    type: str  # apiKey / http / oauth2 / openIdConnect
    description: str = ""
    location: str = Field("", alias="in")  # header / query / cookie (apiKey)
    param_name: str = ""  # header or query parameter name (apiKey)
    scheme: str = ""  # bearer / basic (http)


class API(_Frozen):
    """Root aggregate handed to the document composer."""

    title: str = ""
    description: str = ""
    version: str = ""
    base_url: str = ""
    tags: list[Tag] = []
    endpoints: list[Endpoint] = []
    security_schemes: list[SecurityScheme] = []

    def tag_description(self, name: str) -> str:
        """Return the declared description of tag ``name``, or an empty string."""
        for tag in self.tags:
            if tag.name == name:
                return tag.description
        return ""
