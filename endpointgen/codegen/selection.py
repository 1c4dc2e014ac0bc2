"""Structured results of the path and HTTP method resolvers.

The resolvers decide *which* path template and HTTP method an endpoint uses
for a given set of caller-supplied arguments; these classes hold that decision
as data. The renderer turns them into an ``if``/``elif``/``else`` chain, and
``select`` evaluates them directly.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

__all__ = [
    'MethodBranch',
    'MethodSelection',
    'PathBranch',
    'PathSelection',
    'expand_template',
    'extract_path_variables',
]

_PATH_VARIABLE = re.compile(r'{(\w+)}')


def extract_path_variables(template: str) -> list[str]:
    """Return the ``{name}`` placeholders of a template in order of appearance."""
    return _PATH_VARIABLE.findall(template)


def expand_template(template: str, values: Mapping[str, object]) -> str:
    """Substitute ``values`` into ``template``.

    Leading and trailing slashes are stripped, matching the paths emitted
    into generated code.

    Raises:
        KeyError: If a placeholder has no value.
    """
    stripped = template.strip('/')
    return _PATH_VARIABLE.sub(lambda m: str(values[m.group(1)]), stripped)


@dataclass(frozen=True)
class PathBranch:
    """Use ``template`` when every name in ``variables`` was supplied."""

    variables: tuple[str, ...]
    template: str

    def matches(self, supplied: Iterable[str]) -> bool:
        supplied = set(supplied)
        return all(variable in supplied for variable in self.variables)


@dataclass(frozen=True)
class PathSelection:
    """Ordered conditional choice of a path template.

    Attributes:
        branches: Conditional branches, tested in order.
        fallback: Template used when no branch matches; None when the chain
            has no unconditional branch.
        defaults: Values for template variables that the caller may omit.
    """

    branches: tuple[PathBranch, ...] = ()
    fallback: str | None = None
    defaults: dict[str, str] = field(default_factory=dict)

    @property
    def is_conditional(self) -> bool:
        return bool(self.branches)

    @property
    def templates(self) -> list[str]:
        templates = [branch.template for branch in self.branches]
        if self.fallback is not None:
            templates.append(self.fallback)
        return templates

    @property
    def variables(self) -> list[str]:
        """Every variable referenced by a condition or a template, in order."""
        seen: list[str] = []
        for branch in self.branches:
            for variable in branch.variables:
                if variable not in seen:
                    seen.append(variable)
        for template in self.templates:
            for variable in extract_path_variables(template):
                if variable not in seen:
                    seen.append(variable)
        return seen

    def select(self, supplied: Iterable[str]) -> str | None:
        """Return the template chosen when ``supplied`` arguments are present."""
        supplied = set(supplied)
        for branch in self.branches:
            if branch.matches(supplied):
                return branch.template
        return self.fallback


@dataclass(frozen=True)
class MethodBranch:
    """Use ``method`` when ``argument`` was supplied."""

    argument: str
    method: str


@dataclass(frozen=True)
class MethodSelection:
    branches: tuple[MethodBranch, ...] = ()
    default: str = 'GET'

    @property
    def is_conditional(self) -> bool:
        return bool(self.branches)

    def select(self, supplied: Iterable[str]) -> str:
        supplied = set(supplied)
        for branch in self.branches:
            if branch.argument in supplied:
                return branch.method
        return self.default
