import sys
import os
from tempfile import TemporaryDirectory
import pytest
# Ensure the project root is on sys.path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from test_utils import SAMPLE_SCHEMA_YAML, schema_from_yaml

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with TemporaryDirectory() as dir_path:
        yield dir_path

@pytest.fixture
def sample_schema():
    """A small but complete schema touching every entity kind."""
    return schema_from_yaml(SAMPLE_SCHEMA_YAML)

@pytest.fixture
def sample_schema_file(temp_dir):
    """The sample schema written to disk."""
    path = os.path.join(temp_dir, "webgpu.yml")
    with open(path, "w", encoding="utf-8") as f:
        f.write(SAMPLE_SCHEMA_YAML)
    return path
