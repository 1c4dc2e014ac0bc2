"""Tests for the path and method selection structures."""

import pytest

from endpointgen.codegen.selection import (
    MethodBranch,
    MethodSelection,
    PathBranch,
    PathSelection,
    expand_template,
    extract_path_variables,
)


class TestTemplates:
    """Tests for template helpers."""

    def test_extract_path_variables(self):
        assert extract_path_variables('/{index}/_doc/{id}') == ['index', 'id']

    def test_extract_path_variables_none(self):
        assert extract_path_variables('/_cat/nodes') == []

    def test_expand_template_strips_slashes(self):
        assert expand_template('/{index}/_doc/', {'index': 'logs'}) == 'logs/_doc'

    def test_expand_template_missing_value(self):
        with pytest.raises(KeyError):
            expand_template('/{index}/_doc', {})


class TestPathSelection:
    """Tests for PathSelection."""

    @pytest.fixture
    def selection(self):
        return PathSelection(
            branches=(
                PathBranch(variables=('index', 'id'), template='/{index}/_doc/{id}'),
                PathBranch(variables=('index',), template='/{index}/_doc'),
            ),
            fallback='/_doc',
        )

    def test_branch_matches_all_variables(self):
        branch = PathBranch(variables=('index', 'id'), template='/{index}/_doc/{id}')

        assert branch.matches(['id', 'index', 'body'])
        assert not branch.matches(['index'])

    def test_select_first_matching_branch(self, selection):
        assert selection.select({'index', 'id'}) == '/{index}/_doc/{id}'
        assert selection.select({'index'}) == '/{index}/_doc'

    def test_select_fallback(self, selection):
        assert selection.select([]) == '/_doc'

    def test_select_without_fallback(self):
        selection = PathSelection(
            branches=(PathBranch(variables=('a',), template='/{a}'),)
        )

        assert selection.select([]) is None

    def test_templates_and_variables(self, selection):
        assert selection.templates == ['/{index}/_doc/{id}', '/{index}/_doc', '/_doc']
        assert selection.variables == ['index', 'id']

    def test_unconditional(self):
        selection = PathSelection(fallback='/_cat/nodes')

        assert not selection.is_conditional
        assert selection.templates == ['/_cat/nodes']
        assert selection.variables == []


class TestMethodSelection:
    """Tests for MethodSelection."""

    def test_default_only(self):
        selection = MethodSelection(default='DELETE')

        assert not selection.is_conditional
        assert selection.select(['id']) == 'DELETE'

    def test_conditional_method(self):
        selection = MethodSelection(
            branches=(MethodBranch(argument='id', method='PUT'),), default='POST'
        )

        assert selection.is_conditional
        assert selection.select(['index', 'id']) == 'PUT'
        assert selection.select(['index']) == 'POST'
