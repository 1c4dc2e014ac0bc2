"""Mapping of dotted endpoint names onto module paths.

``indices.put_mapping`` becomes the module path ``['indices']`` and the method
``put_mapping``. For the extended (X-Pack) API surface every name is nested
under the ``xpack`` marker segment and a few abbreviated namespaces are spelled
out; the marker is not part of the output directory layout.
"""

from dataclasses import dataclass

from endpointgen.codegen.utils import is_identifier, sanitize_name_python_keywords
from endpointgen.exceptions import MalformedEndpointNameError

__all__ = [
    'EXTENDED_MARKER',
    'EXTENDED_RENAMES',
    'Namespace',
    'resolve_namespace',
]

EXTENDED_MARKER = 'xpack'

# whole-segment renames applied on the extended surface
EXTENDED_RENAMES = {
    'ml': 'machine_learning',
    'ilm': 'index_lifecycle_management',
}


@dataclass(frozen=True)
class Namespace:
    """Resolved location of an endpoint.

    Attributes:
        segments: Every segment of the name, marker included.
    """

    segments: tuple[str, ...]

    @property
    def method_name(self) -> str:
        return self.segments[-1]

    @property
    def module_path(self) -> tuple[str, ...]:
        return self.segments[:-1]

    @property
    def output_segments(self) -> tuple[str, ...]:
        """Module path as laid out on disk, without a leading marker."""
        path = self.module_path
        if path and path[0] == EXTENDED_MARKER:
            return path[1:]
        return path

    @property
    def function_name(self) -> str:
        """Python name of the generated function and of its module."""
        return sanitize_name_python_keywords(self.method_name)

    @property
    def package_segments(self) -> tuple[str, ...]:
        return tuple(sanitize_name_python_keywords(s) for s in self.output_segments)


def resolve_namespace(name: str, extended: bool = False) -> Namespace:
    """Split an endpoint name into its namespace segments.

    Args:
        name: Dotted endpoint name, e.g. ``'ml.get_jobs'``.
        extended: Resolve for the extended API surface.

    Returns:
        The resolved Namespace. ``resolve_namespace('ml.get_jobs', True)``
        has segments ``('xpack', 'machine_learning', 'get_jobs')``.

    Raises:
        MalformedEndpointNameError: If the name is empty or has a segment
            that is empty or not a valid identifier.
    """
    if not name or not name.strip():
        raise MalformedEndpointNameError(name or '', 'name is empty')

    segments = name.split('.')
    for segment in segments:
        if not segment:
            raise MalformedEndpointNameError(name, 'empty segment')
        if not is_identifier(segment):
            raise MalformedEndpointNameError(
                name, f"segment '{segment}' is not a valid identifier"
            )

    if extended:
        if segments[0] != EXTENDED_MARKER:
            segments = [EXTENDED_MARKER, *segments]
        segments = [EXTENDED_RENAMES.get(segment, segment) for segment in segments]

    return Namespace(segments=tuple(segments))
