"""Per-endpoint exceptions to the general generation rules.

Every irregular endpoint is listed here, keyed by its dotted name, together
with the reason it cannot follow the general algorithm. The resolvers consult
these tables before applying their general rules.
"""

from collections.abc import Mapping
from typing import Any

from endpointgen.codegen.selection import (
    MethodBranch,
    MethodSelection,
    PathBranch,
    PathSelection,
)
from endpointgen.codegen.utils import deep_merge

__all__ = [
    'METHOD_OVERRIDES',
    'PARAM_OVERRIDES',
    'PATH_OVERRIDES',
    'REQUIRED_EXEMPT',
    'specific_params',
]

PATH_OVERRIDES: dict[str, PathSelection] = {
    # The termvectors routes differ only by the trailing id, and the
    # ``_termvectors`` segment itself may be replaced by the caller, so the
    # literal templates from the definition cannot be sorted into a chain.
    'termvectors': PathSelection(
        branches=(
            PathBranch(
                variables=('index', 'id'), template='{index}/{endpoint}/{id}'
            ),
        ),
        fallback='{index}/{endpoint}',
        defaults={'endpoint': '_termvectors'},
    ),
}

METHOD_OVERRIDES: dict[str, MethodSelection] = {
    # Indexing with an explicit id replaces the document; without one the
    # server assigns an id.
    'index': MethodSelection(
        branches=(MethodBranch(argument='id', method='PUT'),), default='POST'
    ),
    # Count accepts a query body, which GET requests cannot carry everywhere.
    'count': MethodSelection(
        branches=(MethodBranch(argument='body', method='POST'),), default='GET'
    ),
}

# The task id of tasks.get is declared as a path part but the endpoint is
# also used to list tasks, so no argument is enforced.
REQUIRED_EXEMPT: frozenset[str] = frozenset({'tasks.get'})

# Parameter corrections, keyed by namespace (first segment) or endpoint name.
PARAM_OVERRIDES: dict[str, dict[str, Any]] = {
    # The cat APIs accept column names as a comma separated list.
    'cat': {
        'h': {
            'type': 'list',
            'description': 'Comma-separated list of column names to display',
        },
    },
}


def specific_params(
    name: str,
    namespace: str | None = None,
    extra: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, Any]:
    """Collect the parameter overrides that apply to an endpoint.

    Namespace-wide overrides come first, then overrides for the exact
    endpoint name; ``extra`` (user configuration) is consulted the same way
    and wins over the built-in table.
    """
    result: dict[str, Any] = {}
    for table in (PARAM_OVERRIDES, extra or {}):
        if namespace and namespace != name and namespace in table:
            result = deep_merge(result, table[namespace])
        if name in table:
            result = deep_merge(result, table[name])
    return result
