"""Selection of the URL path template for an endpoint.

An endpoint may be reachable through several path templates, e.g.
``/{index}/_doc/{id}`` and ``/{index}/_doc``. The generated code has to pick
one at call time depending on which path arguments the caller supplied. The
rule used here:

1. A single template is used unconditionally.
2. Irregular endpoints are looked up in ``PATH_OVERRIDES``.
3. Otherwise templates are ordered by length, longest first (a stable sort,
   so equally long templates keep their declared order), and walked once.
   Each template is guarded by the presence of all of its variables. A
   template whose variables are the same as those of the template emitted
   just before it is dropped, since it could never be reached. The first
   template opens the chain; a template without variables, or the last one,
   closes it unconditionally.
"""

import logging
from collections.abc import Sequence

from endpointgen.codegen.selection import (
    PathBranch,
    PathSelection,
    extract_path_variables,
)
from endpointgen.codegen.specifics import PATH_OVERRIDES
from endpointgen.exceptions import UnresolvablePathSignatureError

logger = logging.getLogger(__name__)

__all__ = ['path_signature', 'resolve_path_selection']


def path_signature(template: str) -> tuple[str, ...]:
    """Ordered, de-duplicated variable names of ``template``."""
    return tuple(dict.fromkeys(extract_path_variables(template)))


def resolve_path_selection(name: str, templates: Sequence[str]) -> PathSelection:
    """Decide how the generated code chooses between ``templates``.

    Args:
        name: Dotted endpoint name, used for the exception table lookup.
        templates: Path templates in declaration order.

    Returns:
        The PathSelection for the endpoint.

    Raises:
        UnresolvablePathSignatureError: If the templates cannot be arranged
            into a chain with a conditional head and nothing after its
            unconditional branch.
    """
    if not templates:
        raise UnresolvablePathSignatureError(name, [], 'no path templates')

    if len(templates) == 1:
        return PathSelection(fallback=templates[0])

    if name in PATH_OVERRIDES:
        return PATH_OVERRIDES[name]

    ordered = sorted(templates, key=len, reverse=True)
    last = len(ordered) - 1

    branches: list[PathBranch] = []
    fallback: str | None = None
    previous: tuple[str, ...] = ()

    for index, template in enumerate(ordered):
        signature = path_signature(template)

        if signature == previous:
            if index == 0:
                raise UnresolvablePathSignatureError(
                    name, ordered, f"longest path '{template}' has no variables"
                )
            logger.debug(f'{name}: skipping {template}, same variables as previous path')
            continue
        previous = signature

        if fallback is not None:
            raise UnresolvablePathSignatureError(
                name, ordered, f"path '{template}' follows the unconditional path"
            )

        if index != 0 and (index == last or not signature):
            fallback = template
            continue

        if any(branch.variables == signature for branch in branches):
            logger.debug(f'{name}: {template} is shadowed by an earlier path')
        branches.append(PathBranch(variables=signature, template=template))

    if fallback is None and len(branches) == 1:
        # every other template was dropped; nothing left to choose between
        return PathSelection(fallback=branches[0].template)

    return PathSelection(branches=tuple(branches), fallback=fallback)
