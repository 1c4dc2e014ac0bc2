"""Code generation module for endpointgen.

Main Components:
    - DefinitionLoader: Loads endpoint definition documents
    - resolve_namespace: Maps dotted endpoint names onto module paths
    - resolve_path_selection: Chooses between the path templates of an endpoint
    - resolve_http_method: Chooses the HTTP method of an endpoint
    - classify_parameters: Merges parameters and finds the required ones
    - render_endpoint / render_test: Build the generated modules
    - CodeEmitter: Handles output of generated code
    - Generator: Runs all of the above over a directory

Example:
    >>> from endpointgen.codegen import Generator
    >>> from endpointgen.config import GeneratorConfig
    >>>
    >>> Generator(GeneratorConfig(), generate_tests=True).generate()
"""

from endpointgen.codegen.emitter import CodeEmitter, FileEmitter, StringEmitter
from endpointgen.codegen.generator import GeneratedEndpoint, Generator, resolve_endpoint
from endpointgen.codegen.loader import DefinitionLoader
from endpointgen.codegen.methods import resolve_http_method
from endpointgen.codegen.namespace import Namespace, resolve_namespace
from endpointgen.codegen.params import (
    ParameterSet,
    classify_parameters,
    format_param_doc,
    required_parts,
)
from endpointgen.codegen.paths import resolve_path_selection
from endpointgen.codegen.renderer import EndpointContext, render_endpoint, render_test
from endpointgen.codegen.selection import (
    MethodBranch,
    MethodSelection,
    PathBranch,
    PathSelection,
    expand_template,
    extract_path_variables,
)
from endpointgen.codegen.tree import ModuleTree
from endpointgen.codegen.types import (
    BodyInfo,
    Deprecation,
    Documentation,
    EndpointDefinition,
    ParamInfo,
    PathAlternative,
)

__all__ = [
    'BodyInfo',
    'CodeEmitter',
    'DefinitionLoader',
    'Deprecation',
    'Documentation',
    'EndpointContext',
    'EndpointDefinition',
    'FileEmitter',
    'GeneratedEndpoint',
    'Generator',
    'MethodBranch',
    'MethodSelection',
    'ModuleTree',
    'Namespace',
    'ParamInfo',
    'ParameterSet',
    'PathAlternative',
    'PathBranch',
    'PathSelection',
    'StringEmitter',
    'classify_parameters',
    'expand_template',
    'extract_path_variables',
    'format_param_doc',
    'render_endpoint',
    'render_test',
    'required_parts',
    'resolve_endpoint',
    'resolve_http_method',
    'resolve_namespace',
    'resolve_path_selection',
]
