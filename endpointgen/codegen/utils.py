import keyword
import re
from collections.abc import Mapping

__all__ = ('capitalize', 'deep_merge', 'is_identifier', 'sanitize_name_python_keywords')

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:].lower()


def is_identifier(text):
    return bool(text) and _IDENTIFIER.match(text) is not None


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name):
        return f'{name}_'
    return name


def deep_merge(base: Mapping, override: Mapping) -> dict:
    """Merge ``override`` into a copy of ``base``.

    Values from ``override`` win on conflicting keys, except that two
    mappings under the same key are merged recursively. Neither argument is
    modified.
    """
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result
