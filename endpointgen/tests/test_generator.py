"""Tests for the Generator pipeline."""

import importlib
import json
import logging
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from endpointgen.codegen.emitter import StringEmitter
from endpointgen.codegen.generator import TEST_HELPER, Generator, resolve_endpoint
from endpointgen.exceptions import (
    ConfigurationError,
    EndpointGenerationError,
    ExternalToolFailure,
    MalformedEndpointNameError,
    UnresolvablePathSignatureError,
)
from endpointgen.resources.conftest_template import RecordingClient

from .fixtures import API_ENDPOINTS, UTILS_MODULE, definition


@pytest.fixture
def generated_packages(tmp_path, monkeypatch):
    """Make the generated packages importable and forget them afterwards."""
    monkeypatch.syspath_prepend(str(tmp_path))
    yield
    for name in list(sys.modules):
        if name.split('.')[0] in ('generated_api', 'generated_xpack'):
            del sys.modules[name]


def write_definitions(directory, *documents):
    directory.mkdir(parents=True, exist_ok=True)
    for document in documents:
        name = next(iter(document))
        (directory / f'{name}.json').write_text(json.dumps(document))


class TestResolveEndpoint:
    """Tests for resolve_endpoint."""

    def test_index(self, load_api):
        context = resolve_endpoint(load_api('index'), package='client')

        assert context.function_name == 'index'
        assert context.import_path == 'client.index'
        assert context.method.select(['id']) == 'PUT'
        assert context.path.fallback == '/{index}/_doc'
        assert context.parameters.required == ('body', 'index')

    def test_namespace_overrides(self, load_api):
        context = resolve_endpoint(load_api('cat.nodes'))

        assert context.parameters.params['h'].type == 'list'

    def test_configured_overrides(self, load_api):
        context = resolve_endpoint(
            load_api('indices.create'),
            overrides={'indices': {'timeout': {'description': 'Custom timeout'}}},
        )

        assert context.parameters.params['timeout'].description == 'Custom timeout'
        assert context.parameters.params['timeout'].type == 'time'

    def test_extended(self, load_xpack):
        context = resolve_endpoint(load_xpack('ml.get_jobs'), extended=True)

        assert context.namespace.output_segments == ('machine_learning',)
        assert context.import_path == 'machine_learning.get_jobs'


class TestGenerator:
    """Tests for generating into a directory."""

    def test_generate_api(self, config, tmp_path):
        results = Generator(config).generate()

        output = tmp_path / 'generated_api'
        assert [result.name for result in results] == API_ENDPOINTS
        assert (output / 'index.py').exists()
        assert (output / 'cat' / 'nodes.py').exists()
        assert (output / 'cat' / '__init__.py').exists()
        assert (output / 'indices' / 'create.py').exists()
        assert (output / 'tasks' / 'get.py').exists()
        assert not (output / 'tests').exists()

    def test_results(self, config, tmp_path):
        result = Generator(config).generate()[2]

        assert result.name == 'index'
        assert result.source.endswith('index.json')
        assert result.endpoint_file == str(tmp_path / 'generated_api' / 'index.py')
        assert result.test_file is None
        assert list(result.sources) == [result.endpoint_file]

    def test_generate_tests(self, config, tmp_path):
        results = Generator(config, generate_tests=True).generate()

        output = tmp_path / 'generated_api'
        assert results[3].test_file == str(
            output / 'tests' / 'api' / 'indices' / 'test_create.py'
        )
        assert (output / 'tests' / 'api' / 'test_index.py').exists()
        assert (output / 'tests' / '__init__.py').exists()
        assert (output / 'tests' / 'conftest.py').read_text() == TEST_HELPER.read_text()

    def test_generate_tests_from_config(self, config, tmp_path):
        config = config.model_copy(update={'generate_tests': True})

        Generator(config).generate()

        assert (tmp_path / 'generated_api' / 'tests' / 'conftest.py').exists()

    def test_custom_test_helper(self, config, tmp_path):
        helper = tmp_path / 'helper.py'
        helper.write_text('# helper\n')
        config = config.model_copy(update={'test_helper': str(helper)})

        Generator(config, generate_tests=True).generate()

        conftest = tmp_path / 'generated_api' / 'tests' / 'conftest.py'
        assert conftest.read_text() == '# helper\n'

    def test_generate_extended(self, config, tmp_path):
        generator = Generator(config, extended=True, generate_tests=True)

        generator.generate()

        output = tmp_path / 'generated_xpack'
        assert (output / 'machine_learning' / 'get_jobs.py').exists()
        assert (output / 'index_lifecycle_management' / 'explain_lifecycle.py').exists()
        assert (
            output / 'tests' / 'api' / 'machine_learning' / 'test_get_jobs.py'
        ).exists()
        assert not (output / 'xpack').exists()
        assert generator.tree.count_endpoints() == 2

    def test_tree(self, config):
        generator = Generator(config)

        generator.generate()

        assert generator.tree.flatten() == {
            '__root__': ['count', 'index', 'termvectors'],
            'cat': ['nodes'],
            'indices': ['create', 'refresh'],
            'tasks': ['get'],
        }

    def test_tree_lists_test_files(self, config):
        generator = Generator(config, generate_tests=True)

        generator.generate()

        tests = generator.tree.get_node(['tests'])
        assert tests.files == ['conftest.py']
        assert generator.tree.get_node(['tests', 'api', 'cat']).files == [
            'test_nodes.py'
        ]
        assert 'test_count.py' in tests.children['api'].files
        assert generator.tree.count_endpoints() == len(API_ENDPOINTS)

    def test_run_yields_progressively(self, config, tmp_path):
        run = Generator(config).run()

        first = next(run)

        assert first.name == 'cat.nodes'
        assert (tmp_path / 'generated_api' / 'cat' / 'nodes.py').exists()
        assert not (tmp_path / 'generated_api' / 'count.py').exists()

    def test_string_emitter(self, config):
        emitter = StringEmitter()

        Generator(config, emitter=emitter, generate_tests=True).generate()

        modules = emitter.get_all_modules()
        assert 'indices/create.py' in modules
        assert 'tests/api/indices/test_create.py' in modules
        assert 'tests/conftest.py' in modules

    def test_generated_code_runs(self, config, generated_packages, recording_client):
        Generator(config).generate()

        from generated_api.indices.create import create

        create(recording_client, index='logs', body={'settings': {}}, timeout='1s')

        request = recording_client.calls[-1]
        assert request.method == 'PUT'
        assert request.path == 'logs'
        assert request.params == {'timeout': '1s'}

    def test_generated_tests_pass(self, config, generated_packages):
        results = Generator(config, generate_tests=True).generate()

        executed = []
        for result in results:
            segments = ('generated_api', 'tests', 'api')
            segments += result.context.namespace.package_segments
            name = '.'.join([*segments, f'test_{result.context.function_name}'])
            module = importlib.import_module(name)
            for attribute, function in vars(module).items():
                if attribute.startswith('test_'):
                    function(RecordingClient())
                    executed.append(attribute)

        assert 'test_index_performs_request' in executed
        assert 'test_index_requires_arguments' in executed
        assert len(executed) > len(results)


class TestFailures:
    """A failing endpoint aborts the run."""

    def test_unresolvable_paths(self, config, tmp_path):
        api = tmp_path / 'api'
        write_definitions(
            api,
            definition('a_first', ['/{index}']),
            definition('broken', ['/_all/_stats', '/_stats']),
            definition('z_last', ['/{index}']),
        )
        config.api.input = str(api)

        with pytest.raises(EndpointGenerationError) as exc_info:
            Generator(config).generate()

        error = exc_info.value
        assert error.endpoint == 'broken'
        assert isinstance(error.cause, UnresolvablePathSignatureError)
        assert 'broken.json' in str(error)
        output = tmp_path / 'generated_api'
        assert (output / 'a_first.py').exists()
        assert not (output / 'broken.py').exists()
        assert not (output / 'z_last.py').exists()

    def test_malformed_name(self, config, tmp_path):
        api = tmp_path / 'api'
        write_definitions(api, definition('indices..create', ['/{index}']))
        config.api.input = str(api)

        with pytest.raises(EndpointGenerationError) as exc_info:
            Generator(config).generate()

        assert isinstance(exc_info.value.cause, MalformedEndpointNameError)

    def test_invalid_document_uses_file_name(self, config, tmp_path):
        api = tmp_path / 'api'
        api.mkdir()
        (api / 'ping.json').write_text('not json')
        config.api.input = str(api)

        with pytest.raises(EndpointGenerationError, match="'ping'"):
            Generator(config).generate()

    def test_missing_input_directory(self, config, tmp_path):
        config.api.input = str(tmp_path / 'missing')

        with pytest.raises(Exception, match='not a directory'):
            Generator(config).generate()

    def test_invalid_parameter_override(self, config):
        config = config.model_copy(update={'overrides': {'cat': {'h': 'list'}}})

        with pytest.raises(EndpointGenerationError) as exc_info:
            Generator(config).generate()

        assert exc_info.value.endpoint == 'cat.nodes'
        assert isinstance(exc_info.value.cause, ConfigurationError)

    def test_endpoint_files_written_together(self, config, tmp_path):
        output = tmp_path / 'generated_api'
        output.mkdir()
        (output / 'tests').write_text('a file, not a directory')

        with pytest.raises(EndpointGenerationError) as exc_info:
            Generator(config, generate_tests=True).generate()

        assert exc_info.value.endpoint == 'cat.nodes'
        assert not (output / 'cat' / 'nodes.py').exists()

    def test_no_partial_test_helper_on_failure(self, config, tmp_path):
        api = tmp_path / 'api'
        write_definitions(api, definition('broken', ['/_all/_stats', '/_stats']))
        config.api.input = str(api)

        with pytest.raises(EndpointGenerationError):
            Generator(config, generate_tests=True).generate()

        assert not (tmp_path / 'generated_api' / 'tests' / 'conftest.py').exists()


class TestLinter:
    """Tests for the post-generation linter run."""

    @pytest.fixture
    def linted(self, config):
        return config.model_copy(update={'linter': ['ruff', 'check', '--fix']})

    def test_disabled(self, config):
        with patch('endpointgen.codegen.generator.subprocess.run') as mock_run:
            generator = Generator(config)
            generator.generate()

        mock_run.assert_not_called()
        assert generator.linter_failure is None

    def test_runs_once_over_output(self, linted):
        with patch('endpointgen.codegen.generator.subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout='', stderr='')
            generator = Generator(linted)
            generator.generate()

        mock_run.assert_called_once_with(
            ['ruff', 'check', '--fix', linted.api.output],
            capture_output=True,
            text=True,
        )
        assert generator.linter_failure is None

    def test_failure_is_logged_not_raised(self, linted, caplog):
        with patch('endpointgen.codegen.generator.subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(
                returncode=1, stdout='', stderr='E501 line too long'
            )
            generator = Generator(linted)
            with caplog.at_level(logging.WARNING):
                results = generator.generate()

        assert len(results) == len(API_ENDPOINTS)
        failure = generator.linter_failure
        assert isinstance(failure, ExternalToolFailure)
        assert failure.returncode == 1
        assert 'E501 line too long' in caplog.text

    def test_missing_tool(self, linted):
        with patch(
            'endpointgen.codegen.generator.subprocess.run',
            side_effect=FileNotFoundError('ruff'),
        ):
            generator = Generator(linted)
            generator.generate()

        assert generator.linter_failure.returncode is None
        assert 'could not be started' in str(generator.linter_failure)

    def test_timeout(self, linted):
        with patch(
            'endpointgen.codegen.generator.subprocess.run',
            side_effect=subprocess.TimeoutExpired('ruff', 10),
        ):
            generator = Generator(linted)
            generator.generate()

        assert generator.linter_failure is not None


def test_generated_code_uses_configured_utils_module(config):
    emitter = StringEmitter()

    Generator(config, emitter=emitter).generate()

    assert f'from {UTILS_MODULE} import listify' in emitter.get_module('count.py')
