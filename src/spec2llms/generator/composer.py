"""Document composer: turns a parsed API into llms.txt text documents."""

import logging

from pydantic import BaseModel

from spec2llms.config import Config
from spec2llms.generator.schema import render_example, render_schema_doc
from spec2llms.parser.base import API, Endpoint, MediaType, Parameter, SecurityScheme
from spec2llms.parser.examples import format_plain, has_example

logger = logging.getLogger(__name__)

UNTAGGED_GROUP = "other"
DEFAULT_BASE_URL = "https://api.example.com"
BODY_METHODS = ("POST", "PUT", "PATCH")
PAYLOAD_DEPTH = 2

METHOD_ORDER = {"GET": 1, "POST": 2, "PUT": 3, "PATCH": 4, "DELETE": 5}
UNKNOWN_METHOD_ORDER = 99


class GroupDocument(BaseModel):
    """One rendered endpoint group, written to ``endpoints/<filename>.txt``."""

    tag: str
    filename: str
    endpoint_count: int
    text: str


class DocumentSet(BaseModel):
    """Everything generated for one API: the index and the group documents."""

    index: str
    groups: list[GroupDocument]


def method_order(method: str) -> int:
    return METHOD_ORDER.get(method.upper(), UNKNOWN_METHOD_ORDER)


def sort_endpoints(endpoints: list[Endpoint]) -> list[Endpoint]:
    """Sort by path, then GET < POST < PUT < PATCH < DELETE < anything else."""
    return sorted(endpoints, key=lambda ep: (ep.path, method_order(ep.method)))


def group_filename(endpoints: list[Endpoint]) -> str:
    """Derive a filesystem-safe group name from the first endpoint's path.

    ``/v1/movie/{id}`` becomes ``v1-movie``; a path made only of
    placeholders becomes ``root``.
    """
    if not endpoints:
        return UNTAGGED_GROUP

    parts = [p for p in endpoints[0].path.lstrip("/").split("/") if p and not p.startswith("{")]
    if not parts:
        return "root"
    return "-".join(parts[:2]).lower()


class DocumentComposer:
    """Builds the index and per-group documents for an API.

    ``config`` supplies title and base-URL overrides; they win over the
    values found in the API whenever they are non-empty.
    """

    def __init__(self, api: API, config: Config | None = None):
        self.api = api
        self.config = config or Config()

    @property
    def title(self) -> str:
        return self.config.title or self.api.title

    @property
    def base_url(self) -> str:
        return self.config.base_url or self.api.base_url

    def group_by_tags(self) -> dict[str, list[Endpoint]]:
        """Partition endpoints by tag. Multi-tag endpoints appear in every group."""
        groups: dict[str, list[Endpoint]] = {}
        for ep in self.api.endpoints:
            for tag in ep.tags or [UNTAGGED_GROUP]:
                groups.setdefault(tag, []).append(ep)
        return {tag: sort_endpoints(eps) for tag, eps in sorted(groups.items())}

    def compose(self) -> DocumentSet:
        """Render every group document and the index."""
        groups = self.group_by_tags()
        filenames = self._assign_filenames(groups)

        documents = [
            GroupDocument(
                tag=tag,
                filename=filenames[tag],
                endpoint_count=len(endpoints),
                text=self.render_group(tag, endpoints),
            )
            for tag, endpoints in groups.items()
        ]
        logger.debug("Composed %d group documents", len(documents))
        return DocumentSet(index=self.render_index(documents), groups=documents)

    def _assign_filenames(self, groups: dict[str, list[Endpoint]]) -> dict[str, str]:
        """Give each group a unique filename, suffixing later collisions with -2, -3, ..."""
        taken: set[str] = set()
        result = {}
        for tag, endpoints in groups.items():
            base = name = group_filename(endpoints)
            count = 1
            while name in taken:
                count += 1
                name = f"{base}-{count}"
            if count > 1:
                logger.debug("Group %r shares filename %s, using %s", tag, base, name)
            taken.add(name)
            result[tag] = f"{name}.txt"
        return result

    # -- index ----------------------------------------------------------------

    def render_index(self, documents: list[GroupDocument]) -> str:
        parts = [f"# {self.title}\n\n"]

        if self.api.description:
            parts.append(f"> {self.api.description}\n\n")
        if self.base_url:
            parts.append(f"Base URL: `{self.base_url}`\n\n")
        if self.api.version:
            parts.append(f"Version: {self.api.version}\n\n")

        if self.api.security_schemes:
            parts.append("## Authentication\n\n")
            parts.extend(self.render_security_scheme(s) for s in self.api.security_schemes)
            parts.append("\n")

        parts.append("## Endpoints\n\n")
        for doc in documents:
            link = self._group_link(doc.filename)
            noun = "endpoint" if doc.endpoint_count == 1 else "endpoints"
            desc = self.api.tag_description(doc.tag)
            if desc:
                parts.append(f"- [{doc.tag}]({link}): {desc} ({doc.endpoint_count} {noun})\n")
            else:
                parts.append(f"- [{doc.tag}]({link}): {doc.endpoint_count} {noun}\n")

        return "".join(parts)

    def _group_link(self, filename: str) -> str:
        if self.config.docs_base_url:
            return f"{self.config.docs_base_url.rstrip('/')}/endpoints/{filename}"
        return f"./endpoints/{filename}"

    def render_security_scheme(self, scheme: SecurityScheme) -> str:
        lines = [f"### {scheme.name}", ""]
        if scheme.description:
            lines += [scheme.description, ""]

        if scheme.type == "apiKey":
            lines += [
                "- **Type**: API Key",
                f"- **Parameter**: `{scheme.param_name}`",
                f"- **In**: {scheme.location}",
            ]
        elif scheme.type == "http":
            lines.append(f"- **Type**: HTTP {scheme.scheme}")
            if scheme.scheme == "bearer":
                lines.append("- **Header**: `Authorization: Bearer <token>`")
            elif scheme.scheme == "basic":
                lines.append("- **Header**: `Authorization: Basic <credentials>`")
        elif scheme.type == "oauth2":
            lines.append("- **Type**: OAuth 2.0")
        elif scheme.type == "openIdConnect":
            lines.append("- **Type**: OpenID Connect")

        return "\n".join(lines) + "\n\n"

    # -- group / endpoint -----------------------------------------------------

    def render_group(self, tag: str, endpoints: list[Endpoint]) -> str:
        parts = [f"# {tag}\n\n"]
        desc = self.api.tag_description(tag)
        if desc:
            parts.append(f"> {desc}\n\n")
        parts.append("\n---\n\n".join(self.render_endpoint(ep) for ep in endpoints))
        return "".join(parts)

    def render_endpoint(self, ep: Endpoint) -> str:
        header = f"## {ep.method} {ep.path}"
        if ep.summary:
            header += f" - {ep.summary}"
        if ep.deprecated:
            header += " ⚠ DEPRECATED"
        parts = [header + "\n\n"]

        if ep.description:
            parts.append(ep.description + "\n\n")

        if ep.parameters:
            parts.append(self.render_parameters(ep.parameters))

        if ep.request_body is not None:
            parts.append("### Request Body\n\n")
            if ep.request_body.description:
                parts.append(ep.request_body.description + "\n\n")
            parts.append(self._render_content(ep.request_body.content))

        if ep.responses:
            parts.append("### Responses\n\n")
            for code in sorted(ep.responses):
                resp = ep.responses[code]
                parts.append(f"**{code}** - {resp.description}\n\n")
                parts.append(self._render_content(resp.content))

        parts.append("### Example\n\n")
        parts.append(self.render_command_example(ep))
        return "".join(parts)

    def render_parameters(self, params: list[Parameter]) -> str:
        rows = [
            "### Parameters",
            "",
            "| Name | In | Type | Required | Description |",
            "|------|-----|------|----------|-------------|",
        ]
        for p in params:
            required = "✓" if p.required else ""
            type_str = f"{p.type} ({p.format})" if p.format else p.type
            desc = p.description
            if p.enum:
                values = "`, `".join(p.enum)
                desc = f"{desc} Enum: `{values}`"
            desc = desc.replace("|", "\\|").replace("\n", " ").strip()
            rows.append(f"| {p.name} | {p.location} | {type_str} | {required} | {desc} |")
        return "\n".join(rows) + "\n\n"

    def _render_content(self, content: dict[str, MediaType]) -> str:
        parts = []
        for media_type in sorted(content):
            parts.append(f"Content-Type: `{media_type}`\n\n")
            schema = content[media_type].schema_
            if schema is not None:
                parts.append(render_schema_doc(schema))
        return "".join(parts)

    # -- command example ------------------------------------------------------

    def request_url(self, ep: Endpoint) -> str:
        """Build an example request URL with path and query parameters filled in."""
        base_url = self.base_url
        if not base_url or base_url.startswith("/"):
            base_url = DEFAULT_BASE_URL + base_url
        base_url = base_url.rstrip("/")

        path = ep.path
        for p in ep.parameters:
            if p.location == "path":
                path = path.replace("{" + p.name + "}", _path_value(p))

        query = [f"{p.name}={_query_value(p)}" for p in ep.parameters if p.location == "query"]

        url = base_url + path
        if query:
            url += "?" + "&".join(query)
        return url

    def auth_header(self) -> str | None:
        """Header for the first security scheme usable as a plain request header."""
        for scheme in self.api.security_schemes:
            if scheme.type == "apiKey" and scheme.location == "header":
                return f"{scheme.param_name}: YOUR_API_KEY"
            if scheme.type == "http" and scheme.scheme == "bearer":
                return "Authorization: Bearer YOUR_TOKEN"
        return None

    def render_command_example(self, ep: Endpoint) -> str:
        lines = [f'curl -X {ep.method} "{self.request_url(ep)}"', '  -H "Content-Type: application/json"']

        header = self.auth_header()
        if header:
            lines.append(f'  -H "{header}"')

        body = self._request_payload(ep)
        if body:
            lines.append("  -d '" + body.replace("'", "'\\''") + "'")

        return "```bash\n" + " \\\n".join(lines) + "\n```\n\n"

    def _request_payload(self, ep: Endpoint) -> str:
        if ep.request_body is None or ep.method not in BODY_METHODS or not ep.request_body.content:
            return ""
        first = sorted(ep.request_body.content)[0]
        schema = ep.request_body.content[first].schema_
        if schema is None:
            return ""
        return render_example(schema, 0, PAYLOAD_DEPTH)


def _path_value(p: Parameter) -> str:
    if has_example(p.example):
        return format_plain(p.example)
    if p.type == "integer":
        return "1"
    return "example"


def _query_value(p: Parameter) -> str:
    if has_example(p.example):
        return format_plain(p.example)
    if p.enum:
        return p.enum[0]
    if p.type in ("integer", "number"):
        return "1"
    if p.type == "boolean":
        return "true"
    return "value"
