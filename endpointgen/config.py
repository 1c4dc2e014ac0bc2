import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from endpointgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['endpointgen.yaml', 'endpointgen.yml']

DEFAULT_LINTER = ['ruff', 'check', '--fix', '--quiet']


class SurfaceConfig(BaseModel):
    """Input and output locations of one API surface."""

    input: str = Field(
        ..., description='Directory holding the endpoint definition JSON files.'
    )

    output: str = Field(..., description='Output directory for the generated code.')

    package: str = Field(
        '',
        description='Import path of the output directory, used by generated tests.',
    )


class GeneratorConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='ENDPOINTGEN_', env_nested_delimiter='__'
    )

    api: SurfaceConfig = Field(
        SurfaceConfig(
            input='rest-api-spec/api',
            output='elasticsearch_api/api',
            package='elasticsearch_api.api',
        ),
        description='The standard API surface.',
    )

    xpack: SurfaceConfig = Field(
        SurfaceConfig(
            input='rest-api-spec/xpack',
            output='elasticsearch_api/xpack',
            package='elasticsearch_api.xpack',
        ),
        description='The extended (X-Pack) API surface.',
    )

    utils_module: str = Field(
        'elasticsearch_api.utils',
        description='Module the generated code imports its runtime helpers from.',
    )

    generate_tests: bool = Field(False, description='Whether to generate test files.')

    verbose: bool = Field(False, description='Print generated sources and the tree.')

    linter: list[str] | None = Field(
        DEFAULT_LINTER,
        description='Command run on the output directory after generation.',
    )

    test_helper: str | None = Field(
        None,
        description='File copied to tests/conftest.py instead of the bundled one.',
    )

    overrides: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description='Parameter overrides keyed by namespace or endpoint name.',
    )

    def surface(self, extended: bool = False) -> SurfaceConfig:
        return self.xpack if extended else self.api


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text()) or {}


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def _load(path: Path) -> GeneratorConfig:
    try:
        if path.suffix == '.json':
            data = load_json(path)
        else:
            data = load_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f'Cannot read configuration: {e}', str(path))

    return _validate(data, str(path))


def _validate(data: Any, source: str) -> GeneratorConfig:
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        field = '.'.join(str(loc) for loc in errors[0]['loc']) if errors else None
        raise ConfigurationError('Invalid configuration', source, field)


def get_config(path: str | None = None) -> GeneratorConfig:
    """Load configuration from a file, pyproject.toml, or defaults.

    Lookup order: the explicit ``path``, ``endpointgen.yaml`` /
    ``endpointgen.yml`` in the working directory, ``[tool.endpointgen]`` in
    ``pyproject.toml``, and finally defaults combined with ``ENDPOINTGEN_*``
    environment variables.
    """
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError('Configuration file not found', path)
        return _load(config_path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return _load(candidate)

    pyproject_path = Path(cwd) / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        pyproject = tomllib.loads(pyproject_path.read_text())
        tools = pyproject.get('tool', {})

        if 'endpointgen' in tools:
            return _validate(tools['endpointgen'], str(pyproject_path))

    return GeneratorConfig()
