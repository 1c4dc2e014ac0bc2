"""Selection of the HTTP method for an endpoint."""

from collections.abc import Sequence

from endpointgen.codegen.selection import MethodSelection
from endpointgen.codegen.specifics import METHOD_OVERRIDES
from endpointgen.codegen.types import PathAlternative

__all__ = ['resolve_http_method']


def resolve_http_method(
    name: str, alternatives: Sequence[PathAlternative]
) -> MethodSelection:
    """Return the HTTP method choice for an endpoint.

    Only the first method of the first path alternative is consulted;
    endpoints whose method depends on the call are listed in
    ``METHOD_OVERRIDES``.
    """
    if name in METHOD_OVERRIDES:
        return METHOD_OVERRIDES[name]

    return MethodSelection(default=alternatives[0].methods[0].upper())
