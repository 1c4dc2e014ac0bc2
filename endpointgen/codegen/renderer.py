"""Rendering of resolved endpoints into Python modules.

The renderer is the only place that knows what the generated code looks
like. It consumes the structured decisions of the resolvers (PathSelection,
MethodSelection, ParameterSet) and builds AST bodies for the endpoint module
and its test module; the emitter turns those into files.

A generated endpoint function takes the transport client and keyword
arguments and looks like::

    def create(client, **arguments):
        if arguments.get('index') is None:
            raise ValueError("Required argument 'index' missing")
        arguments = dict(arguments)
        headers = arguments.pop('headers', None)
        body = arguments.pop('body', None)
        _index = arguments.pop('index', None)
        method = 'PUT'
        path = f'{listify(_index)}'
        params = {key: value for key, value in arguments.items() if key in PARAMS}
        return client.perform_request(method, path, params=params, body=body, headers=headers)
"""

import ast
import re
from dataclasses import dataclass

from endpointgen.codegen.ast_utils import (
    _all,
    _and,
    _argument,
    _assign,
    _attr,
    _call,
    _const,
    _docstring,
    _func,
    _import,
    _name,
    _raise,
)
from endpointgen.codegen.namespace import Namespace
from endpointgen.codegen.params import ParameterSet, format_param_doc
from endpointgen.codegen.selection import (
    MethodSelection,
    PathSelection,
    expand_template,
)
from endpointgen.codegen.types import EndpointDefinition

__all__ = [
    'EndpointContext',
    'local_name',
    'render_endpoint',
    'render_method',
    'render_path',
    'render_test',
    'sample_arguments',
]

LISTIFY = 'listify'
PARAMS_CONSTANT = 'PARAMS'
VARIABLE_MARKER = '_'

_PLACEHOLDER = re.compile(r'{(\w+)}')


@dataclass(frozen=True)
class EndpointContext:
    """Everything the renderer needs to know about one endpoint."""

    definition: EndpointDefinition
    namespace: Namespace
    method: MethodSelection
    path: PathSelection
    parameters: ParameterSet
    package: str = ''
    utils_module: str = 'elasticsearch_api.utils'

    @property
    def function_name(self) -> str:
        return self.namespace.function_name

    @property
    def import_path(self) -> str:
        """Dotted module path the generated function is importable from."""
        parts = [self.package, *self.namespace.package_segments, self.function_name]
        return '.'.join(part for part in parts if part)

    @property
    def arguments(self) -> list[str]:
        """Path arguments that become local variables, in order of use."""
        names = list(self.path.variables)
        for branch in self.method.branches:
            if branch.argument != 'body' and branch.argument not in names:
                names.append(branch.argument)
        return names


def local_name(argument: str) -> str:
    """Name of the local holding a caller-supplied argument."""
    if argument == 'body':
        return 'body'
    return f'{VARIABLE_MARKER}{argument}'


def _supplied(argument: str) -> ast.expr:
    # falsy values such as 0 or an empty body still count as supplied
    return ast.Compare(
        left=_name(local_name(argument)), ops=[ast.IsNot()], comparators=[_const(None)]
    )


def _path_expr(template: str) -> ast.expr:
    # '{index}/_doc/{id}' -> f'{listify(_index)}/_doc/{listify(_id)}'
    stripped = template.strip('/')
    values: list[ast.expr] = []
    position = 0
    for match in _PLACEHOLDER.finditer(stripped):
        if match.start() > position:
            values.append(_const(stripped[position : match.start()]))
        values.append(
            ast.FormattedValue(
                value=_call(_name(LISTIFY), [_name(local_name(match.group(1)))]),
                conversion=-1,
            )
        )
        position = match.end()

    if not values:
        return _const(stripped)
    if position < len(stripped):
        values.append(_const(stripped[position:]))
    return ast.JoinedStr(values=values)


def render_path(selection: PathSelection, target: str = 'path') -> list[ast.stmt]:
    """Render a PathSelection as an assignment or an if/elif/else chain."""
    if not selection.is_conditional:
        return [_assign(_name(target), _path_expr(selection.fallback))]

    if selection.fallback is not None:
        orelse: list[ast.stmt] = [
            _assign(_name(target), _path_expr(selection.fallback))
        ]
    else:
        expected = ', '.join(
            ' and '.join(branch.variables) for branch in selection.branches
        )
        orelse = [
            _raise('ValueError', f'Missing path arguments, expected one of: {expected}')
        ]

    for branch in reversed(selection.branches):
        test = _and([_supplied(variable) for variable in branch.variables])
        orelse = [
            ast.If(
                test=test,
                body=[_assign(_name(target), _path_expr(branch.template))],
                orelse=orelse,
            )
        ]
    return orelse


def render_method(selection: MethodSelection, target: str = 'method') -> ast.stmt:
    """Render a MethodSelection as an assignment of a (conditional) constant."""
    value: ast.expr = _const(selection.default)
    for branch in reversed(selection.branches):
        value = ast.IfExp(
            test=_supplied(branch.argument),
            body=_const(branch.method),
            orelse=value,
        )
    return _assign(_name(target), value)


def _docs(context: EndpointContext) -> str:
    definition = context.definition
    documentation = definition.documentation
    sections: list[str] = []

    if documentation and documentation.description:
        sections.append(documentation.description.strip())
    else:
        sections.append(f"Perform the '{definition.name}' request.")

    arguments = [
        format_param_doc(name, info) for name, info in context.parameters.parts.items()
    ]
    arguments.extend(
        format_param_doc(name, info)
        for name, info in context.parameters.params.items()
        if name not in context.parameters.parts
    )
    if definition.body is not None:
        body = definition.body.description or 'The request body'
        entry = f':arg body: {body.strip()}'
        if definition.body.required:
            entry += ' (*Required*)'
        arguments.append(entry)
    if arguments:
        sections.append('\n'.join(arguments))

    deprecation = definition.deprecation
    if deprecation is not None:
        note = f'.. deprecated:: {deprecation.version or ""}'.rstrip()
        if deprecation.description:
            note += f'\n   {deprecation.description.strip()}'
        sections.append(note)

    if documentation and documentation.url:
        sections.append(f'`<{documentation.url}>`_')

    return '\n\n'.join(sections)


def _indent_docstring(text: str) -> str:
    lines = text.split('\n')
    indented = [lines[0]] + [f'    {line}' if line else '' for line in lines[1:]]
    if len(lines) > 1:
        indented.append('    ')
    return '\n'.join(indented)


def _pop(name: str, default: ast.expr | None = None) -> ast.expr:
    return _call(
        _attr('arguments', 'pop'),
        [_const(name), default if default is not None else _const(None)],
    )


def _required_guard(argument: str) -> ast.If:
    return ast.If(
        test=ast.Compare(
            left=_call(_attr('arguments', 'get'), [_const(argument)]),
            ops=[ast.Is()],
            comparators=[_const(None)],
        ),
        body=[_raise('ValueError', f"Required argument '{argument}' missing")],
        orelse=[],
    )


def _endpoint_function(context: EndpointContext) -> ast.FunctionDef:
    body: list[ast.stmt] = [_docstring(_indent_docstring(_docs(context)))]

    body.extend(_required_guard(argument) for argument in context.parameters.required)

    body.append(_assign(_name('arguments'), _call(_name('dict'), [_name('arguments')])))
    body.append(_assign(_name('headers'), _pop('headers')))
    body.append(_assign(_name('body'), _pop('body')))

    defaults = context.path.defaults
    for argument in context.arguments:
        default = _const(defaults[argument]) if argument in defaults else None
        body.append(_assign(_name(local_name(argument)), _pop(argument, default)))

    body.append(render_method(context.method))
    body.extend(render_path(context.path))

    body.append(
        _assign(
            _name('params'),
            ast.DictComp(
                key=_name('key'),
                value=_name('value'),
                generators=[
                    ast.comprehension(
                        target=ast.Tuple(
                            elts=[
                                ast.Name(id='key', ctx=ast.Store()),
                                ast.Name(id='value', ctx=ast.Store()),
                            ],
                            ctx=ast.Store(),
                        ),
                        iter=_call(_attr('arguments', 'items')),
                        ifs=[
                            ast.Compare(
                                left=_name('key'),
                                ops=[ast.In()],
                                comparators=[_name(PARAMS_CONSTANT)],
                            )
                        ],
                        is_async=0,
                    )
                ],
            ),
        )
    )
    body.append(
        ast.Return(
            value=_call(
                _attr('client', 'perform_request'),
                [_name('method'), _name('path')],
                [
                    ast.keyword(arg='params', value=_name('params')),
                    ast.keyword(arg='body', value=_name('body')),
                    ast.keyword(arg='headers', value=_name('headers')),
                ],
            )
        )
    )

    return _func(
        name=context.function_name,
        args=[_argument('client')],
        body=body,
        kwargs=_argument('arguments'),
    )


def render_endpoint(context: EndpointContext) -> list[ast.stmt]:
    """Build the module body of the generated endpoint."""
    params = sorted(context.parameters.params)
    return [
        _docstring(
            f"Generated from the '{context.definition.name}' REST API definition."
        ),
        _import(context.utils_module, [LISTIFY]),
        _all([context.function_name]),
        _assign(
            _name(PARAMS_CONSTANT),
            _call(
                _name('frozenset'),
                [ast.Tuple(elts=[_const(name) for name in params], ctx=ast.Load())]
                if params
                else [],
            ),
        ),
        _endpoint_function(context),
    ]


def _sample_value(argument: str) -> ast.expr:
    if argument == 'body':
        return ast.Dict(keys=[], values=[])
    return _const(f'test_{argument}')


def sample_arguments(context: EndpointContext) -> list[str]:
    """Arguments a generated test supplies.

    Every required argument, plus the variables of the most specific route
    so that the test exercises the head of the path chain.
    """
    if context.path.is_conditional:
        route = list(context.path.branches[0].variables)
    else:
        route = [
            variable
            for variable in context.path.variables
            if variable not in context.path.defaults
        ]
    supplied = list(context.parameters.required)
    supplied.extend(variable for variable in route if variable not in supplied)
    return supplied


def render_test(context: EndpointContext) -> list[ast.stmt]:
    """Build the pytest module exercising the generated endpoint."""
    function = context.function_name
    supplied = sample_arguments(context)

    template = context.path.select(supplied)
    values = dict(context.path.defaults)
    values.update({argument: f'test_{argument}' for argument in supplied})
    expected_path = expand_template(template, values)
    expected_method = context.method.select(supplied)

    call = ast.Expr(
        value=_call(
            _name(function),
            [_name('client')],
            [
                ast.keyword(arg=argument, value=_sample_value(argument))
                for argument in supplied
            ],
        )
    )
    perform_test = _func(
        name=f'test_{function}_performs_request',
        args=[_argument('client')],
        body=[
            call,
            _assign(
                _name('request'),
                ast.Subscript(
                    value=_attr('client', 'calls'),
                    slice=ast.UnaryOp(op=ast.USub(), operand=_const(1)),
                    ctx=ast.Load(),
                ),
            ),
            ast.Assert(
                test=ast.Compare(
                    left=_attr('request', 'method'),
                    ops=[ast.Eq()],
                    comparators=[_const(expected_method)],
                )
            ),
            ast.Assert(
                test=ast.Compare(
                    left=_attr('request', 'path'),
                    ops=[ast.Eq()],
                    comparators=[_const(expected_path)],
                )
            ),
        ],
    )

    body: list[ast.stmt] = [
        _docstring(f"Tests for the generated '{context.definition.name}' endpoint."),
    ]
    if context.parameters.required:
        body.append(ast.Import(names=[ast.alias(name='pytest')]))
    body.append(_import(context.import_path, [function]))
    body.append(perform_test)

    if context.parameters.required:
        body.append(
            _func(
                name=f'test_{function}_requires_arguments',
                args=[_argument('client')],
                body=[
                    ast.With(
                        items=[
                            ast.withitem(
                                context_expr=_call(
                                    _attr('pytest', 'raises'), [_name('ValueError')]
                                )
                            )
                        ],
                        body=[
                            ast.Expr(value=_call(_name(function), [_name('client')]))
                        ],
                    )
                ],
            )
        )
    return body
