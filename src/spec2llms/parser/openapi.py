"""OpenAPI 3.x document loader.

Reads an OpenAPI description from a local file or a URL, checks that it
looks like OpenAPI 3.x and converts it into the API model. Schemas are
dereferenced and ``allOf`` / ``oneOf`` / ``anyOf`` are flattened here, so
the generator only ever sees finite, composition-free schema trees.
"""

import logging
from pathlib import Path

import requests
import yaml

from pydantic import ValidationError

from spec2llms.errors import SpecLoadError, SpecValidationError

from .base import (
    API,
    Endpoint,
    MediaType,
    Parameter,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
    Tag,
)
from .refs import RefResolver

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")
FETCH_TIMEOUT = 30


def parse(source: str, skip_validation: bool = False) -> API:
    """Load an OpenAPI document from a path or URL and convert it into an API."""
    doc = load_document(source)
    if not skip_validation:
        validate_document(doc)
    elif not isinstance(doc, dict):
        raise SpecValidationError("OpenAPI document must be a mapping")

    try:
        api = convert_document(doc)
    except ValidationError as e:
        raise SpecValidationError(f"invalid OpenAPI spec: {e}") from e
    logger.debug("Parsed %s: %d endpoints", source, len(api.endpoints))
    return api


def is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def load_document(source: str):
    """Read ``source`` and return the raw YAML/JSON tree."""
    if is_url(source):
        text = _fetch(source)
    else:
        text = _read_file(Path(source))

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"failed to parse OpenAPI document {source}: {e}") from e


def _fetch(url: str) -> str:
    logger.debug("Fetching %s", url)
    try:
        resp = requests.get(url, timeout=FETCH_TIMEOUT)
    except requests.RequestException as e:
        raise SpecLoadError(f"failed to fetch {url}: {e}") from e

    if resp.status_code != 200:
        raise SpecLoadError(f"failed to fetch {url}: HTTP {resp.status_code} {resp.reason}")
    return resp.text


def _read_file(file_path: Path) -> str:
    if file_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise SpecLoadError(
            f"unsupported file format: {file_path.suffix or '(none)'} (expected .json, .yaml, or .yml)"
        )
    try:
        return file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SpecLoadError(f"failed to read {file_path}: {e}") from e


def validate_document(doc) -> None:
    """Check the structural minimum of an OpenAPI 3.x document."""
    hint = "\n\nUse --skip-validation to ignore validation errors"
    if not isinstance(doc, dict):
        raise SpecValidationError("invalid OpenAPI spec: document must be a mapping" + hint)

    version = str(doc.get("openapi", ""))
    if not version:
        if "swagger" in doc:
            raise SpecValidationError("invalid OpenAPI spec: Swagger 2.0 is not supported, convert to OpenAPI 3.x" + hint)
        raise SpecValidationError("invalid OpenAPI spec: missing 'openapi' version field" + hint)
    if not version.startswith("3."):
        raise SpecValidationError(f"invalid OpenAPI spec: unsupported version {version}" + hint)

    info = doc.get("info")
    if not isinstance(info, dict):
        raise SpecValidationError("invalid OpenAPI spec: missing 'info' object" + hint)
    for key in ("title", "version"):
        if not info.get(key):
            raise SpecValidationError(f"invalid OpenAPI spec: info.{key} is required" + hint)

    paths = doc.get("paths")
    if not isinstance(paths, dict):
        raise SpecValidationError("invalid OpenAPI spec: missing 'paths' object" + hint)

    for path, item in paths.items():
        if not isinstance(item, dict):
            raise SpecValidationError(f"invalid OpenAPI spec: path {path} must be a mapping" + hint)
        for method in HTTP_METHODS:
            operation = item.get(method)
            if operation is None:
                continue
            if not isinstance(operation, dict):
                raise SpecValidationError(f"invalid OpenAPI spec: {method.upper()} {path} must be a mapping" + hint)
            if not isinstance(operation.get("responses"), dict):
                raise SpecValidationError(
                    f"invalid OpenAPI spec: {method.upper()} {path} has no 'responses' object" + hint
                )


def convert_document(doc: dict) -> API:
    """Convert a raw OpenAPI 3.x tree into the API model."""
    resolver = RefResolver(doc)
    info = _mapping(doc.get("info"))
    servers = _sequence(doc.get("servers"))

    base_url = ""
    if servers and isinstance(servers[0], dict):
        base_url = _text(servers[0].get("url"))

    tags = [
        Tag(name=_text(t["name"]), description=_text(t.get("description")))
        for t in _sequence(doc.get("tags"))
        if isinstance(t, dict) and t.get("name")
    ]

    endpoints = []
    for path, item in _mapping(doc.get("paths")).items():
        item = resolver.deref(item)
        if not isinstance(item, dict):
            continue
        shared_params = _sequence(item.get("parameters"))
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, dict):
                continue
            endpoints.append(_convert_operation(str(path), method, operation, shared_params, resolver))

    components = _mapping(doc.get("components"))
    schemes = []
    for name, raw in _mapping(components.get("securitySchemes")).items():
        raw = resolver.deref(raw)
        if not isinstance(raw, dict):
            continue
        schemes.append(
            SecurityScheme(
                name=str(name),
                type=_text(raw.get("type")),
                description=_text(raw.get("description")),
                location=_text(raw.get("in")),
                param_name=_text(raw.get("name")),
                scheme=_text(raw.get("scheme")).lower(),
            )
        )

    return API(
        title=_text(info.get("title")),
        description=_text(info.get("description")),
        version=_text(info.get("version")),
        base_url=base_url,
        tags=tags,
        endpoints=endpoints,
        security_schemes=schemes,
    )


def _convert_operation(
    path: str, method: str, operation: dict, shared_params: list, resolver: RefResolver
) -> Endpoint:
    request_body = None
    raw_body = resolver.deref(operation.get("requestBody"))
    if isinstance(raw_body, dict):
        request_body = RequestBody(
            description=_text(raw_body.get("description")),
            required=bool(raw_body.get("required", False)),
            content=_convert_content(raw_body.get("content"), resolver),
        )

    responses = {}
    for code, raw in _mapping(operation.get("responses")).items():
        raw = resolver.deref(raw)
        if not isinstance(raw, dict):
            continue
        responses[str(code)] = Response(
            description=_text(raw.get("description")),
            content=_convert_content(raw.get("content"), resolver),
        )

    return Endpoint(
        method=method.upper(),
        path=path,
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
        tags=[str(t) for t in _sequence(operation.get("tags"))],
        parameters=_convert_parameters(shared_params, _sequence(operation.get("parameters")), resolver),
        request_body=request_body,
        responses=responses,
        deprecated=bool(operation.get("deprecated", False)),
    )


def _convert_parameters(shared: list, own: list, resolver: RefResolver) -> list[Parameter]:
    """Merge path-level and operation-level parameters, operation winning on (name, in)."""
    merged: dict[tuple[str, str], Parameter] = {}
    for raw in list(shared) + list(own):
        raw = resolver.deref(raw)
        if not isinstance(raw, dict) or "name" not in raw:
            continue
        param = _convert_parameter(raw, resolver)
        merged[(param.name, param.location)] = param
    return list(merged.values())


def _convert_parameter(raw: dict, resolver: RefResolver) -> Parameter:
    schema = resolver.deref(raw.get("schema")) or {}
    if not isinstance(schema, dict):
        schema = {}

    example = raw.get("example")
    if example is None:
        example = schema.get("example")

    return Parameter(
        name=str(raw["name"]),
        location=_text(raw.get("in")) or "query",
        description=_text(raw.get("description")),
        required=bool(raw.get("required", False)),
        type=_first_type(schema.get("type")) or "string",
        format=_text(schema.get("format")),
        enum=_string_enum(schema.get("enum")),
        default=schema.get("default"),
        example=example,
    )


def _convert_content(content, resolver: RefResolver) -> dict[str, MediaType]:
    result = {}
    for media_type, raw in _mapping(content).items():
        if not isinstance(raw, dict):
            continue
        schema = None
        if isinstance(raw.get("schema"), dict):
            schema = convert_schema(raw["schema"], resolver)
        result[str(media_type)] = MediaType(schema=schema, example=raw.get("example"))
    return result


def convert_schema(node: dict, resolver: RefResolver, seen: frozenset = frozenset()) -> Schema:
    """Convert a raw schema node, resolving references and flattening composition.

    ``seen`` holds the references being expanded on the current branch; a
    reference that points back into it is truncated to an empty schema.
    """
    ref = ""
    if "$ref" in node:
        ref = str(node["$ref"])
        if ref in seen:
            return Schema(ref=ref)
        target = resolver.lookup(ref)
        if not isinstance(target, dict):
            return Schema(ref=ref)
        seen = seen | {ref}
        node = target

    fields = {
        "type": _first_type(node.get("type")),
        "format": _text(node.get("format")),
        "description": _text(node.get("description")),
        "required": [r for r in _sequence(node.get("required")) if isinstance(r, str)],
        "enum": _string_enum(node.get("enum")),
        "example": node.get("example"),
        "ref": ref,
    }
    properties: dict[str, Schema] = {}
    items = None

    for name, prop in _mapping(node.get("properties")).items():
        if isinstance(prop, dict):
            properties[str(name)] = convert_schema(prop, resolver, seen)

    for branch in _sequence(node.get("allOf")):
        if not isinstance(branch, dict):
            continue
        merged = convert_schema(branch, resolver, seen)
        if not fields["type"] and merged.type:
            fields["type"] = merged.type
        properties.update(merged.properties)
        if items is None and merged.items is not None:
            items = merged.items

    for keyword in ("oneOf", "anyOf"):
        branches = _sequence(node.get(keyword))
        if branches and not properties and isinstance(branches[0], dict):
            first = convert_schema(branches[0], resolver, seen)
            fields["type"] = first.type
            properties = dict(first.properties)
            items = first.items

    if isinstance(node.get("items"), dict):
        items = convert_schema(node["items"], resolver, seen)

    return Schema(properties=properties, items=items, **fields)


def _first_type(value) -> str:
    """Return the schema type, taking the first non-null entry of a 3.1 type list."""
    if isinstance(value, list):
        for entry in value:
            if entry != "null":
                return str(entry)
        return ""
    return str(value) if value else ""


def _string_enum(values) -> list[str]:
    return [v for v in _sequence(values) if isinstance(v, str)]


def _text(value) -> str:
    """Coerce a YAML scalar (number, bool, date) used as text into a string."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


def _sequence(value) -> list:
    return value if isinstance(value, list) else []
