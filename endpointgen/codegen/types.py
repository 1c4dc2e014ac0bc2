"""Models for REST API endpoint definitions.

Each input document describes one endpoint: its documentation, the URL path
alternatives it can be reached through, its query parameters and its body.
The models validate the raw JSON and expose a few derived values used by the
resolvers.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = [
    'BodyInfo',
    'Deprecation',
    'Documentation',
    'EndpointDefinition',
    'ParamInfo',
    'PathAlternative',
]


class ParamInfo(BaseModel):
    """A query parameter or path part as declared by the definition."""

    model_config = ConfigDict(extra='allow')

    type: str | None = None
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    options: list[Any] | None = None
    default: Any = None

    @field_validator('deprecated', mode='before')
    @classmethod
    def _deprecated_flag(cls, value):
        # some documents attach {version, description} instead of a flag
        if isinstance(value, dict):
            return True
        return bool(value)


class Deprecation(BaseModel):
    model_config = ConfigDict(extra='allow')

    version: str | None = None
    description: str | None = None


class Documentation(BaseModel):
    model_config = ConfigDict(extra='allow')

    url: str | None = None
    description: str | None = None


class BodyInfo(BaseModel):
    model_config = ConfigDict(extra='allow')

    description: str | None = None
    required: bool = False


class PathAlternative(BaseModel):
    """One URL template of an endpoint, e.g. ``/{index}/_doc/{id}``."""

    model_config = ConfigDict(extra='allow')

    path: str
    methods: list[str] = Field(..., min_length=1)
    parts: dict[str, ParamInfo] = Field(default_factory=dict)
    deprecated: Deprecation | None = None


class EndpointDefinition(BaseModel):
    """A single endpoint loaded from one definition document.

    The document layout is ``{"<dotted.name>": {"documentation": ...,
    "url": {"paths": [...]}, "params": {...}, "body": {...}}}``; the loader
    lifts the name into the model and flattens ``url.paths`` into ``paths``.
    """

    model_config = ConfigDict(frozen=True, extra='allow')

    name: str
    documentation: Documentation | None = None
    paths: list[PathAlternative] = Field(..., min_length=1)
    params: dict[str, ParamInfo] = Field(default_factory=dict)
    body: BodyInfo | None = None
    stability: str | None = None
    visibility: str | None = None

    @model_validator(mode='before')
    @classmethod
    def _flatten_url(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        url = data.pop('url', None)
        if 'paths' not in data:
            if not isinstance(url, dict) or 'paths' not in url:
                raise ValueError("definition has no 'url.paths'")
            data['paths'] = url['paths']
        if isinstance(data.get('documentation'), str):
            data['documentation'] = {'url': data['documentation']}
        if data.get('params') is None:
            data['params'] = {}
        return data

    @property
    def templates(self) -> list[str]:
        return [alternative.path for alternative in self.paths]

    @property
    def body_required(self) -> bool:
        return bool(self.body and self.body.required)

    @property
    def deprecation(self) -> Deprecation | None:
        """Deprecation metadata, taken from the last path alternative."""
        return self.paths[-1].deprecated
