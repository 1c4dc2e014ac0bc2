"""Loading of REST API endpoint definition documents.

Every input file holds a JSON object with exactly one key, the dotted endpoint
name, mapping to the endpoint definition. Files whose name starts with an
underscore (``_common.json``) hold shared data and are not endpoints.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from upath import UPath

from endpointgen.codegen.types import EndpointDefinition
from endpointgen.exceptions import DefinitionLoadError

logger = logging.getLogger(__name__)

__all__ = ['DefinitionLoader']


class DefinitionLoader:
    """Reads endpoint definitions from a directory of JSON files.

    Example:
        >>> loader = DefinitionLoader()
        >>> for path in loader.files('./rest-api-spec/api'):
        ...     definition = loader.load(path)
        ...     print(definition.name, definition.templates)
    """

    suffix = '.json'

    def files(self, input_dir: str | Path | UPath) -> list[UPath]:
        """List the endpoint definition files of ``input_dir`` in name order.

        Raises:
            DefinitionLoadError: If the directory does not exist.
        """
        directory = UPath(input_dir)
        if not directory.is_dir():
            raise DefinitionLoadError(str(directory), 'not a directory')

        files = [
            path
            for path in directory.iterdir()
            if path.is_file()
            and path.name.endswith(self.suffix)
            and not path.name.startswith('_')
        ]
        return sorted(files, key=lambda path: path.name)

    def load(self, path: str | Path | UPath) -> EndpointDefinition:
        """Load and validate a single endpoint definition.

        Raises:
            DefinitionLoadError: If the file cannot be read, is not valid JSON,
                or does not describe exactly one well-formed endpoint.
        """
        path = UPath(path)
        try:
            content = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise DefinitionLoadError(str(path), cause=e)

        return self.parse(content, source=str(path))

    def parse(self, content: object, source: str = '<memory>') -> EndpointDefinition:
        """Validate an already decoded document."""
        if not isinstance(content, dict) or len(content) != 1:
            raise DefinitionLoadError(
                source, 'expected a single top-level key naming the endpoint'
            )

        name, document = next(iter(content.items()))
        if not isinstance(document, dict):
            raise DefinitionLoadError(source, f"definition of '{name}' is not an object")

        try:
            definition = EndpointDefinition.model_validate({**document, 'name': name})
        except ValidationError as e:
            raise DefinitionLoadError(source, cause=e)

        logger.debug(f'Loaded {name} from {source} ({len(definition.paths)} paths)')
        return definition
