"""AST utilities for code generation.

Small constructors for the Python AST nodes the renderer needs, so the
rendering code reads as a description of the generated source.
"""

import ast
from collections.abc import Iterable

__all__ = [
    '_all',
    '_and',
    '_argument',
    '_assign',
    '_attr',
    '_call',
    '_const',
    '_docstring',
    '_func',
    '_import',
    '_name',
    '_raise',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _const(value) -> ast.Constant:
    return ast.Constant(value=value)


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _argument(name: str) -> ast.arg:
    return ast.arg(arg=name, annotation=None)


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, ast.Attribute):
        target.ctx = ast.Store()
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _import(module: str, names: list[str]) -> ast.ImportFrom:
    return ast.ImportFrom(
        module=module,
        names=[ast.alias(name=name) for name in names],
        level=0,
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _and(values: list[ast.expr]) -> ast.expr:
    if not values:
        raise ValueError('_and requires at least one operand')
    if len(values) == 1:
        return values[0]
    return ast.BoolOp(op=ast.And(), values=values)


def _raise(exception: str, message: str) -> ast.Raise:
    return ast.Raise(exc=_call(_name(exception), [_const(message)]), cause=None)


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=_const(text))


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    kwargs: ast.arg | None = None,
) -> ast.FunctionDef:
    """Function definition with positional ``args`` and an optional ``**kwargs``."""
    arguments = ast.arguments(
        posonlyargs=[],
        args=args,
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=kwargs,
        defaults=[],
    )
    return ast.FunctionDef(
        name=name, args=arguments, body=body, decorator_list=[], returns=None
    )


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=ast.Tuple(
            elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()
        ),
    )
