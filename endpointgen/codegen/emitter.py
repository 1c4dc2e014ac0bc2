"""Code emitter interfaces and implementations for code generation output.

This module provides the CodeEmitter interface and concrete implementations
for emitting generated modules either to files on disk or to strings.
"""

import ast
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from upath import UPath

from endpointgen.exceptions import OutputError

logger = logging.getLogger(__name__)

TESTS_DIR = 'tests'
TESTS_API_DIR = (TESTS_DIR, 'api')


class CodeEmitter(ABC):
    """Abstract base class for code emitters.

    A CodeEmitter turns AST bodies into source code and stores it under a
    module path relative to its output root. Converting and storing are
    separate steps so callers can render everything belonging to one
    endpoint before writing any of it.
    """

    validate_syntax: bool = True

    def to_source(self, body: list[ast.stmt], name: str) -> str:
        """Unparse a module body and check that the result compiles.

        Raises:
            SyntaxError: If the generated code is not valid Python.
        """
        module = ast.Module(body=body, type_ignores=[])
        ast.fix_missing_locations(module)
        source = ast.unparse(module) + '\n'

        if self.validate_syntax:
            self._validate_syntax(source, name)
        return source

    @abstractmethod
    def write(self, segments: Sequence[str], filename: str, content: str) -> str:
        """Store ``content`` as ``segments/filename``.

        Returns:
            The path (or key) the content was stored under.
        """
        pass

    def write_all(
        self, entries: Sequence[tuple[tuple[Sequence[str], str], str]]
    ) -> list[str]:
        """Store several files that belong together.

        Args:
            entries: ``((segments, filename), content)`` pairs, with the
                locations returned by ``endpoint_location`` and
                ``test_location``.

        Returns:
            The paths (or keys) in the order of ``entries``.
        """
        return [
            self.write(segments, filename, content)
            for (segments, filename), content in entries
        ]

    def copy_file(
        self, source: str | Path | UPath, segments: Sequence[str], filename: str
    ) -> str:
        """Copy ``source`` verbatim to ``segments/filename``."""
        source = UPath(source)
        try:
            content = source.read_text(encoding='utf-8')
        except OSError as e:
            raise OutputError(str(source), cause=e)
        return self.write(segments, filename, content)

    def endpoint_location(
        self, segments: Sequence[str], name: str
    ) -> tuple[tuple[str, ...], str]:
        return tuple(segments), f'{name}.py'

    def test_location(
        self, segments: Sequence[str], name: str
    ) -> tuple[tuple[str, ...], str]:
        return (*TESTS_API_DIR, *segments), f'test_{name}.py'

    def _validate_syntax(self, source: str, name: str) -> None:
        try:
            compile(source, f'{name}.py', 'exec')
        except SyntaxError as e:
            raise SyntaxError(f'Generated code for {name} has invalid syntax: {e}')


class FileEmitter(CodeEmitter):
    """Emits generated code to Python files on disk.

    Files are written atomically: the content goes to a hidden sibling file
    first, which then replaces the target. ``write_all`` stages every file
    of a group before replacing any target, so a failing group leaves no
    partial output. Every directory created below the output root receives
    an empty ``__init__.py``.
    """

    def __init__(
        self,
        output_dir: str | Path | UPath,
        validate_syntax: bool = True,
        create_init: bool = True,
    ):
        """Initialize the file emitter.

        Args:
            output_dir: Directory where files will be written.
            validate_syntax: Whether to validate Python syntax before writing.
            create_init: Whether to create ``__init__.py`` files in package
                directories.
        """
        self.output_dir = UPath(output_dir)
        self.validate_syntax = validate_syntax
        self.create_init = create_init
        self._written_files: list[str] = []

    def write(self, segments: Sequence[str], filename: str, content: str) -> str:
        return self.write_all([((segments, filename), content)])[0]

    def write_all(
        self, entries: Sequence[tuple[tuple[Sequence[str], str], str]]
    ) -> list[str]:
        targets = [
            (self._ensure_directory(segments) / filename, content)
            for (segments, filename), content in entries
        ]
        return self._write_files(targets)

    def write_init_file(self, directory: UPath) -> None:
        """Create an empty __init__.py file in ``directory`` if it has none."""
        init_file = directory / '__init__.py'

        if not init_file.exists():
            directory.mkdir(parents=True, exist_ok=True)
            init_file.touch()

    def _ensure_directory(self, segments: Sequence[str]) -> UPath:
        directory = self.output_dir
        try:
            directory.mkdir(parents=True, exist_ok=True)
            for segment in segments:
                directory = directory / segment
                directory.mkdir(exist_ok=True)
                if self.create_init:
                    self.write_init_file(directory)
        except OSError as e:
            raise OutputError(str(directory), cause=e)
        return directory

    def _write_files(self, targets: Sequence[tuple[UPath, str]]) -> list[str]:
        staged: list[UPath] = []
        current = None
        try:
            for file_path, content in targets:
                current = file_path
                temporary = file_path.with_name(f'.{file_path.name}.tmp')
                staged.append(temporary)
                temporary.write_text(content, encoding='utf-8')
            for (file_path, _), temporary in zip(targets, staged, strict=True):
                current = file_path
                temporary.replace(file_path)
        except OSError as e:
            for temporary in staged:
                temporary.unlink(missing_ok=True)
            raise OutputError(str(current), cause=e)

        written = []
        for file_path, _ in targets:
            self._written_files.append(str(file_path))
            logger.info(f'Wrote {file_path}')
            written.append(str(file_path))
        return written

    def get_written_files(self) -> list[str]:
        """Get list of all files written by this emitter."""
        return self._written_files.copy()


class StringEmitter(CodeEmitter):
    """Emits generated code as strings.

    This emitter is useful for testing or when you need to inspect the
    generated code without touching the filesystem.
    """

    def __init__(self, validate_syntax: bool = True):
        self.validate_syntax = validate_syntax
        self._modules: dict[str, str] = {}

    def write(self, segments: Sequence[str], filename: str, content: str) -> str:
        key = '/'.join([*segments, filename])
        self._modules[key] = content
        return key

    def get_module(self, key: str) -> str | None:
        """Get a previously emitted module by its ``dir/name.py`` key."""
        return self._modules.get(key)

    def get_all_modules(self) -> dict[str, str]:
        return self._modules.copy()
