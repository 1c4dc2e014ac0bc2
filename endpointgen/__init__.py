"""endpointgen - Generate Python client modules from REST API definitions.

endpointgen reads a directory of endpoint definition documents (one JSON file
per endpoint, in the Elasticsearch REST API spec format) and writes one
Python module per endpoint, laid out in packages that follow the dotted
endpoint names, plus optional pytest modules.

Quick Start:
    >>> from endpointgen import Generator, GeneratorConfig
    >>>
    >>> config = GeneratorConfig(generate_tests=True)
    >>> Generator(config).generate()

CLI Usage:
    $ endpointgen generate --tests --verbose
    $ endpointgen generate --xpack --input ./api/xpack --output ./client/xpack
"""

from endpointgen.codegen import (
    DefinitionLoader,
    Generator,
    resolve_http_method,
    resolve_namespace,
    resolve_path_selection,
)
from endpointgen.config import GeneratorConfig, SurfaceConfig, get_config
from endpointgen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    DefinitionError,
    DefinitionLoadError,
    EndpointGenerationError,
    EndpointGenError,
    ExternalToolFailure,
    MalformedEndpointNameError,
    OutputError,
    UnresolvablePathSignatureError,
)

__all__ = [
    # Main classes
    'Generator',
    'DefinitionLoader',
    'resolve_namespace',
    'resolve_path_selection',
    'resolve_http_method',
    # Configuration
    'GeneratorConfig',
    'SurfaceConfig',
    'get_config',
    # Exceptions
    'EndpointGenError',
    'DefinitionError',
    'DefinitionLoadError',
    'MalformedEndpointNameError',
    'CodeGenerationError',
    'UnresolvablePathSignatureError',
    'EndpointGenerationError',
    'ConfigurationError',
    'OutputError',
    'ExternalToolFailure',
]
