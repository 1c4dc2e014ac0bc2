"""Custom exceptions for endpointgen.

This module defines the hierarchy of exceptions raised while turning REST API
definition documents into client modules, so that callers can tell a broken
input document from a generation failure or an output problem.
"""


class EndpointGenError(Exception):
    """Base exception for all endpointgen errors.

    Example:
        try:
            generator.generate()
        except EndpointGenError as e:
            print(f"endpointgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class DefinitionError(EndpointGenError):
    """Base exception for problems with an input API definition."""

    pass


class DefinitionLoadError(DefinitionError):
    """An endpoint definition document could not be read or has the wrong shape.

    Raised for unreadable files, invalid JSON, documents without exactly one
    top-level key, and definitions missing required fields such as
    ``url.paths``.

    Attributes:
        source: The file the definition was loaded from.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | str | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load endpoint definition from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class MalformedEndpointNameError(DefinitionError):
    """An endpoint name cannot be turned into a module path.

    Attributes:
        name: The offending endpoint name.
        reason: Explanation of what is wrong with it.
    """

    def __init__(self, name: str, reason: str | None = None):
        self.name = name
        self.reason = reason
        message = f"Malformed endpoint name '{name}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class CodeGenerationError(EndpointGenError):
    """Error during code generation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class UnresolvablePathSignatureError(CodeGenerationError):
    """The path alternatives of an endpoint do not form a usable branch chain.

    Attributes:
        endpoint: The endpoint name.
        paths: The path templates in the order they were walked.
        reason: What made the chain unusable.
    """

    def __init__(self, endpoint: str, paths: list[str], reason: str):
        self.endpoint = endpoint
        self.paths = list(paths)
        self.reason = reason
        message = f'Cannot resolve path selection ({reason}); paths: {", ".join(paths)}'
        super().__init__(message, context=endpoint)


class EndpointGenerationError(CodeGenerationError):
    """Generating the files for one endpoint failed.

    Attributes:
        endpoint: The endpoint name, or the source file when the name is unknown.
        source: The definition file being processed.
    """

    def __init__(
        self,
        endpoint: str,
        source: str | None = None,
        cause: Exception | None = None,
    ):
        self.endpoint = endpoint
        self.source = source
        message = f"Failed to generate endpoint '{endpoint}'"
        if source:
            message += f' from {source}'
        super().__init__(message, context=endpoint, cause=cause)


class ConfigurationError(EndpointGenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(EndpointGenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class ExternalToolFailure(EndpointGenError):
    """The post-generation linter could not be run or reported a failure.

    This error is logged, not raised, by the generator.

    Attributes:
        command: The command line that was run.
        returncode: Exit status, or None when the tool could not be started.
        output: Captured output of the tool.
    """

    def __init__(
        self,
        command: list[str],
        returncode: int | None = None,
        output: str | None = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        message = f"External tool '{' '.join(command)}'"
        if returncode is None:
            message += ' could not be started'
        else:
            message += f' exited with status {returncode}'
        if output:
            message += f': {output.strip()}'
        super().__init__(message)
