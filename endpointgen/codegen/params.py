"""Classification of endpoint arguments.

Merges the declared query parameters with endpoint specific corrections,
collects the path parts, and works out which arguments the generated function
has to insist on.
"""

import textwrap
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from endpointgen.codegen.selection import extract_path_variables
from endpointgen.codegen.specifics import REQUIRED_EXEMPT
from endpointgen.codegen.types import EndpointDefinition, ParamInfo
from endpointgen.codegen.utils import capitalize, deep_merge
from endpointgen.exceptions import ConfigurationError

__all__ = [
    'ParameterSet',
    'classify_parameters',
    'format_param_doc',
    'required_parts',
]

DOC_WIDTH = 79


@dataclass(frozen=True)
class ParameterSet:
    """Arguments accepted by a generated endpoint function.

    Attributes:
        params: Query parameters after overrides were applied.
        parts: Path parts declared across all path alternatives.
        required: Names the caller must supply, ``'body'`` first when the
            body is required.
    """

    params: dict[str, ParamInfo] = field(default_factory=dict)
    parts: dict[str, ParamInfo] = field(default_factory=dict)
    required: tuple[str, ...] = ()


def required_parts(
    name: str, templates: Sequence[str], body_required: bool = False
) -> tuple[str, ...]:
    """Names that every call of the endpoint has to supply.

    A path variable is required only if it appears in every template: if it
    is missing from one, the caller can pick that route and omit it.
    """
    if name in REQUIRED_EXEMPT:
        return ()

    required: list[str] = []
    if body_required:
        required.append('body')

    variable_sets = [extract_path_variables(template) for template in templates]
    if variable_sets:
        first, *rest = variable_sets
        for variable in dict.fromkeys(first):
            if all(variable in others for others in rest):
                required.append(variable)

    return tuple(required)


def _merge_params(
    declared: Mapping[str, ParamInfo], overrides: Mapping[str, Any]
) -> dict[str, ParamInfo]:
    raw = {
        name: info.model_dump(exclude_defaults=True) for name, info in declared.items()
    }
    merged = deep_merge(raw, overrides)

    params: dict[str, ParamInfo] = {}
    for name, info in merged.items():
        try:
            params[name] = ParamInfo.model_validate(info)
        except ValidationError as e:
            raise ConfigurationError(
                f'Invalid parameter override: {e.errors()[0]["msg"]}', field=name
            ) from e
    return params


def classify_parameters(
    definition: EndpointDefinition, overrides: Mapping[str, Any] | None = None
) -> ParameterSet:
    """Build the ParameterSet of ``definition``.

    Args:
        definition: The loaded endpoint definition.
        overrides: Parameter corrections, merged over the declared
            parameters (see ``specifics.specific_params``).
    """
    params = _merge_params(definition.params, overrides or {})

    parts: dict[str, ParamInfo] = {}
    for alternative in definition.paths:
        parts.update(alternative.parts)

    return ParameterSet(
        params=params,
        parts=parts,
        required=required_parts(
            definition.name, definition.templates, definition.body_required
        ),
    )


def format_param_doc(name: str, info: ParamInfo) -> str:
    """Render the docstring entry describing one argument.

    >>> print(format_param_doc('wait', ParamInfo(type='boolean', required=True)))
    :arg wait: [Boolean] [TODO] (*Required*)
    """
    kind = 'string' if info.type in (None, 'enum') else info.type
    description = info.description.strip() if info.description else '[TODO]'

    entry = f':arg {name}: [{capitalize(kind)}] {description}'
    if info.required:
        entry += ' (*Required*)'
    if info.deprecated:
        entry += ' *Deprecated*'

    lines = textwrap.wrap(
        ' '.join(entry.split()),
        width=DOC_WIDTH,
        subsequent_indent='    ',
        break_long_words=False,
        break_on_hyphens=False,
    )
    if info.options:
        options = ', '.join(str(option) for option in info.options)
        lines.extend(
            textwrap.wrap(
                f'(options: {options})',
                width=DOC_WIDTH,
                initial_indent='    ',
                subsequent_indent='    ',
            )
        )
    return '\n'.join(lines)
