"""Typed models for the apiterm TUI.

These describe an already parsed API description. Producing them is the job of
a ``SpecLoader`` collaborator; the TUI only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

JsonValue: TypeAlias = str | int | float | bool | None | list["JsonValue"] | dict[str, "JsonValue"]

HttpMethod = Literal["get", "post", "put", "delete", "patch", "options", "head", "trace"]
ParameterLocation = Literal["path", "query", "header", "cookie"]
SchemaType = Literal["string", "number", "integer", "boolean", "array", "object", "null", "unknown"]


@dataclass(frozen=True)
class SchemaConstraints:
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    pattern: str | None = None
    unique_items: bool = False


# eq=False: schemas compare and hash by identity. Dereferenced graphs may be
# cyclic, so structural equality would recurse forever.
@dataclass(frozen=True, eq=False)
class SchemaInfo:
    type: SchemaType = "unknown"
    display_type: str = ""
    format: str | None = None
    description: str | None = None
    nullable: bool = False
    read_only: bool = False
    write_only: bool = False
    enum_values: list[str] | None = None
    example: JsonValue = None
    default_value: JsonValue = None
    properties: dict[str, SchemaInfo] | None = None
    required: list[str] = field(default_factory=list)
    items: SchemaInfo | None = None
    all_of: list[SchemaInfo] | None = None
    one_of: list[SchemaInfo] | None = None
    any_of: list[SchemaInfo] | None = None
    ref_name: str | None = None
    constraints: SchemaConstraints | None = None

    @property
    def label(self) -> str:
        """Short type label for list rows."""
        return self.ref_name or self.display_type or self.type


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    location: ParameterLocation
    required: bool = False
    deprecated: bool = False
    description: str | None = None
    schema: SchemaInfo | None = None
    example: JsonValue = None


@dataclass(frozen=True)
class MediaTypeInfo:
    media_type: str
    schema: SchemaInfo | None = None
    example: JsonValue = None


@dataclass(frozen=True)
class RequestBodyInfo:
    content: list[MediaTypeInfo]
    required: bool = False
    description: str | None = None

    def media(self, media_type: str) -> MediaTypeInfo | None:
        """Return the content entry for a media type, if declared."""
        for entry in self.content:
            if entry.media_type == media_type:
                return entry
        return None


@dataclass(frozen=True)
class ResponseHeaderInfo:
    name: str
    required: bool = False
    description: str | None = None
    schema: SchemaInfo | None = None


@dataclass(frozen=True)
class ResponseInfo:
    status_code: str
    description: str = ""
    content: list[MediaTypeInfo] = field(default_factory=list)
    headers: list[ResponseHeaderInfo] = field(default_factory=list)


@dataclass(frozen=True)
class Endpoint:
    id: str
    method: HttpMethod
    path: str
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    tags: list[str] = field(default_factory=list)
    deprecated: bool = False
    parameters: list[ParameterInfo] = field(default_factory=list)
    request_body: RequestBodyInfo | None = None
    responses: list[ResponseInfo] = field(default_factory=list)


@dataclass(frozen=True)
class TagGroup:
    name: str
    endpoints: list[Endpoint]
    description: str | None = None


@dataclass(frozen=True)
class ServerVariable:
    default_value: str
    enum_values: list[str] | None = None
    description: str | None = None


@dataclass(frozen=True)
class ServerInfo:
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] = field(default_factory=dict)

    def resolved_url(self) -> str:
        """Return the URL with every ``{variable}`` replaced by its default."""
        url = self.url
        for name, variable in self.variables.items():
            url = url.replace("{" + name + "}", variable.default_value)
        return url


@dataclass(frozen=True)
class SpecInfo:
    title: str
    version: str
    description: str | None = None
    spec_version: str = ""


@dataclass(frozen=True)
class ParsedSpec:
    info: SpecInfo
    servers: list[ServerInfo]
    tag_groups: list[TagGroup]
    endpoints: list[Endpoint]


@dataclass(frozen=True)
class RequestDraft:
    """Everything a RequestSender needs to issue one request."""

    endpoint: Endpoint
    server: ServerInfo | None
    # Keyed "location:name", e.g. "path:petId".
    param_values: dict[str, str]
    body: str | None = None


@dataclass(frozen=True)
class HttpResponse:
    status: int
    status_text: str
    headers: dict[str, str]
    body: str
    duration_ms: float
