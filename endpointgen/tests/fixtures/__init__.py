"""Test fixtures for endpointgen tests.

The ``api`` and ``xpack`` directories hold endpoint definition documents
trimmed from the Elasticsearch REST API spec. This module doubles as the
runtime helper module generated code imports ``listify`` from.
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent
API_DIR = FIXTURES_DIR / 'api'
XPACK_DIR = FIXTURES_DIR / 'xpack'

UTILS_MODULE = __name__

API_ENDPOINTS = [
    'cat.nodes',
    'count',
    'index',
    'indices.create',
    'indices.refresh',
    'tasks.get',
    'termvectors',
]


def listify(value):
    """Render a path argument, joining sequences with commas."""
    if isinstance(value, (list, tuple)):
        return ','.join(str(item) for item in value)
    return str(value)


def definition(name: str, paths: list, **extra) -> dict:
    """Build a raw endpoint document with the given path alternatives.

    ``paths`` holds templates, or ``(template, methods)`` pairs.
    """
    alternatives = []
    for path in paths:
        template, methods = path if isinstance(path, tuple) else (path, ['GET'])
        alternatives.append({'path': template, 'methods': methods})
    return {name: {'url': {'paths': alternatives}, **extra}}
