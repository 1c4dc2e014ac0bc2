import pytest

from endpointgen.codegen.loader import DefinitionLoader
from endpointgen.config import GeneratorConfig, SurfaceConfig
from endpointgen.resources.conftest_template import RecordingClient

from .fixtures import API_DIR, UTILS_MODULE, XPACK_DIR


@pytest.fixture
def loader():
    return DefinitionLoader()


@pytest.fixture
def load_api(loader):
    """Load a fixture definition of the standard surface by endpoint name."""

    def load(name, directory=API_DIR):
        return loader.load(directory / f'{name}.json')

    return load


@pytest.fixture
def load_xpack(load_api):
    def load(name):
        return load_api(name, XPACK_DIR)

    return load


@pytest.fixture
def recording_client():
    return RecordingClient()


@pytest.fixture
def config(tmp_path):
    """Configuration reading the fixtures and writing below ``tmp_path``."""
    return GeneratorConfig(
        api=SurfaceConfig(
            input=str(API_DIR),
            output=str(tmp_path / 'generated_api'),
            package='generated_api',
        ),
        xpack=SurfaceConfig(
            input=str(XPACK_DIR),
            output=str(tmp_path / 'generated_xpack'),
            package='generated_xpack',
        ),
        utils_module=UTILS_MODULE,
        linter=None,
    )
