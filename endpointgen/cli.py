import logging
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax

from endpointgen.codegen.generator import Generator
from endpointgen.config import GeneratorConfig, get_config

console = Console()
app = typer.Typer(
    name='endpointgen',
    help='Generate Python client modules from REST API definition files',
    no_args_is_help=True,
)


def say_status(status: str, message: str, style: str = 'green') -> None:
    console.print(
        f'[bold {style}]{status:>12}[/bold {style}]  {escape(message)}', highlight=False
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _with_locations(
    config: GeneratorConfig,
    extended: bool,
    input_dir: str | None,
    output_dir: str | None,
) -> GeneratorConfig:
    update = {}
    if input_dir:
        update['input'] = input_dir
    if output_dir:
        update['output'] = output_dir
    if not update:
        return config

    surface = config.surface(extended).model_copy(update=update)
    return config.model_copy(update={'xpack' if extended else 'api': surface})


@app.command()
def generate(
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Output more information')
    ] = False,
    tests: Annotated[
        bool, typer.Option('--tests', '-t', help='Generate test files')
    ] = False,
    xpack: Annotated[
        bool, typer.Option('--xpack', '-x', help='Generate the X-Pack API surface')
    ] = False,
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    input_dir: Annotated[
        str | None,
        typer.Option('--input', '-i', help='Directory of endpoint definition files'),
    ] = None,
    output_dir: Annotated[
        str | None,
        typer.Option('--output', '-o', help='Output directory for generated code'),
    ] = None,
) -> None:
    """Generate source code and tests from the REST API JSON definitions.

    Examples:
        endpointgen generate
        endpointgen generate --tests --verbose
        endpointgen generate --xpack -c endpointgen.yaml
    """
    try:
        settings = get_config(config)
        verbose = verbose or settings.verbose
        configure_logging(verbose)
        settings = _with_locations(settings, xpack, input_dir, output_dir)

        generator = Generator(
            settings, extended=xpack, generate_tests=tests or settings.generate_tests
        )
        for endpoint in generator.run():
            say_status('json', endpoint.source, 'yellow')
            say_status('create', endpoint.endpoint_file)
            if endpoint.test_file:
                say_status('create', endpoint.test_file)
            if verbose:
                for source in endpoint.sources.values():
                    console.print(Syntax(source, 'python', theme='monokai'))

        if generator.linter_failure:
            say_status('lint', generator.linter_failure.message, 'yellow')

        if verbose:
            console.print(generator.tree.to_rich(generator.surface.output))

        count = generator.tree.count_endpoints()
        console.print(
            f'[green]Successfully generated code[/green] for {count} endpoints '
            f'in {generator.surface.output}'
        )

    except Exception as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the version of endpointgen."""
    try:
        console.print(f'endpointgen version: {package_version("endpointgen")}')
    except PackageNotFoundError:
        console.print('endpointgen version: unknown')


if __name__ == '__main__':
    app()
