"""Generation run over a directory of endpoint definitions.

For every definition file, in listing order, the Generator loads the
definition, resolves namespace, HTTP method, path selection and parameters,
renders the endpoint module (and its test module), and writes them. Once all
endpoints are done it copies the shared test support file and runs the
linter over the output directory.

A failure while processing one endpoint aborts the whole run. Both modules of
an endpoint are rendered before either is written, and every write is atomic,
so a failing endpoint leaves no partial file behind.
"""

import logging
import subprocess
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from upath import UPath

from endpointgen.codegen.emitter import TESTS_DIR, CodeEmitter, FileEmitter
from endpointgen.codegen.loader import DefinitionLoader
from endpointgen.codegen.methods import resolve_http_method
from endpointgen.codegen.namespace import resolve_namespace
from endpointgen.codegen.params import classify_parameters
from endpointgen.codegen.paths import resolve_path_selection
from endpointgen.codegen.renderer import EndpointContext, render_endpoint, render_test
from endpointgen.codegen.specifics import specific_params
from endpointgen.codegen.tree import ModuleTree
from endpointgen.codegen.types import EndpointDefinition
from endpointgen.config import GeneratorConfig
from endpointgen.exceptions import (
    EndpointGenError,
    EndpointGenerationError,
    ExternalToolFailure,
)

logger = logging.getLogger(__name__)

__all__ = ['GeneratedEndpoint', 'Generator', 'TEST_HELPER', 'resolve_endpoint']

TEST_HELPER = Path(__file__).parent.parent / 'resources' / 'conftest_template.py'


@dataclass
class GeneratedEndpoint:
    """Outcome of generating one endpoint.

    Attributes:
        source: The definition file the endpoint was loaded from.
        context: The resolved endpoint.
        endpoint_file: Where the endpoint module was written.
        test_file: Where the test module was written, if tests were generated.
        sources: Generated source code keyed by written path.
    """

    source: str
    context: EndpointContext
    endpoint_file: str
    test_file: str | None = None
    sources: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.context.definition.name


def resolve_endpoint(
    definition: EndpointDefinition,
    *,
    extended: bool = False,
    overrides: Mapping[str, Mapping[str, Any]] | None = None,
    package: str = '',
    utils_module: str = 'elasticsearch_api.utils',
) -> EndpointContext:
    """Run every resolver over ``definition``."""
    namespace = resolve_namespace(definition.name, extended)
    top_level = namespace.output_segments[0] if namespace.output_segments else None

    return EndpointContext(
        definition=definition,
        namespace=namespace,
        method=resolve_http_method(definition.name, definition.paths),
        path=resolve_path_selection(definition.name, definition.templates),
        parameters=classify_parameters(
            definition, specific_params(definition.name, top_level, overrides)
        ),
        package=package,
        utils_module=utils_module,
    )


class Generator:
    """Generates client modules for one API surface.

    Example:
        >>> from endpointgen.config import GeneratorConfig
        >>> generator = Generator(GeneratorConfig(), extended=True, generate_tests=True)
        >>> for endpoint in generator.run():
        ...     print(endpoint.name, endpoint.endpoint_file)
    """

    def __init__(
        self,
        config: GeneratorConfig,
        extended: bool = False,
        generate_tests: bool | None = None,
        loader: DefinitionLoader | None = None,
        emitter: CodeEmitter | None = None,
    ):
        """Initialize the generator.

        Args:
            config: Generator configuration.
            extended: Generate the extended (X-Pack) API surface.
            generate_tests: Override ``config.generate_tests``.
            loader: Optional custom definition loader.
            emitter: Optional custom emitter; defaults to writing files into
                the surface's output directory.
        """
        self.config = config
        self.extended = extended
        self.surface = config.surface(extended)
        self.generate_tests = (
            config.generate_tests if generate_tests is None else generate_tests
        )
        self.loader = loader or DefinitionLoader()
        self.emitter = emitter or FileEmitter(self.surface.output)
        self.tree = ModuleTree(name=self.surface.output)
        self.linter_failure: ExternalToolFailure | None = None

    def run(self) -> Iterator[GeneratedEndpoint]:
        """Generate every endpoint, yielding each one once it is written.

        The test support file is copied and the linter is run after the last
        endpoint was yielded.

        Raises:
            EndpointGenerationError: If any endpoint fails; the run stops.
        """
        files = self.loader.files(self.surface.input)
        logger.info(f'Generating {len(files)} endpoints from {self.surface.input}')

        for path in files:
            yield self.generate_endpoint(path)

        if self.generate_tests:
            self.copy_test_helper()

        self.linter_failure = self.run_linter()

    def generate(self) -> list[GeneratedEndpoint]:
        """Generate every endpoint and return the results."""
        return list(self.run())

    def generate_endpoint(self, path: str | Path | UPath) -> GeneratedEndpoint:
        """Load, resolve, render and write a single endpoint."""
        name = UPath(path).stem
        try:
            definition = self.loader.load(path)
            name = definition.name
            context = resolve_endpoint(
                definition,
                extended=self.extended,
                overrides=self.config.overrides,
                package=self.surface.package,
                utils_module=self.config.utils_module,
            )
            segments = context.namespace.package_segments
            module = context.function_name

            rendered = [
                (
                    self.emitter.endpoint_location(segments, module),
                    self.emitter.to_source(render_endpoint(context), module),
                )
            ]
            if self.generate_tests:
                rendered.append(
                    (
                        self.emitter.test_location(segments, module),
                        self.emitter.to_source(render_test(context), f'test_{module}'),
                    )
                )

            written = self.emitter.write_all(rendered)
        except (EndpointGenError, SyntaxError) as e:
            raise EndpointGenerationError(name, str(path), cause=e) from e

        self.tree.add_endpoint(segments, module)
        for (directory, filename), _ in rendered[1:]:
            self.tree.add_file(directory, filename)

        return GeneratedEndpoint(
            source=str(path),
            context=context,
            endpoint_file=written[0],
            test_file=written[1] if len(written) > 1 else None,
            sources={
                location: source
                for location, (_, source) in zip(written, rendered, strict=True)
            },
        )

    def copy_test_helper(self) -> str:
        """Copy the shared test support file to ``tests/conftest.py``."""
        helper = self.config.test_helper or TEST_HELPER
        written = self.emitter.copy_file(helper, (TESTS_DIR,), 'conftest.py')
        self.tree.add_file((TESTS_DIR,), 'conftest.py')
        return written

    def run_linter(self) -> ExternalToolFailure | None:
        """Run the configured linter over the output directory.

        A failure is logged and returned, never raised.
        """
        if not self.config.linter:
            return None

        command = [*self.config.linter, str(self.surface.output)]
        logger.debug(f'Running {" ".join(command)}')
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except (OSError, subprocess.SubprocessError):
            failure = ExternalToolFailure(command)
        else:
            if result.returncode == 0:
                return None
            failure = ExternalToolFailure(
                command, result.returncode, result.stderr or result.stdout
            )

        logger.warning(str(failure))
        return failure
