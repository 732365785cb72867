"""
Shared fixtures for the esprune test suite.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to Python path
src_root = str(Path(__file__).parent.parent / 'src')
if src_root not in sys.path:
    sys.path.insert(0, src_root)

from esprune.core.config import config_manager  # noqa: E402
from esprune.core.errors import TransportError  # noqa: E402
from esprune.storage.models import Credentials  # noqa: E402

FIXED_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

SCENARIO_METADATA = {
    'cluster_name': '123456789012:logs',
    'metadata': {
        'indices': {
            '.kibana': {},
            'logs-2024-01-01': {},
            'logs-2024-01-02': {},
        }
    }
}


class FakeSearchClient:
    """Records every call and replays canned responses per path."""

    def __init__(self, metadata=None, responses=None):
        self.metadata = SCENARIO_METADATA if metadata is None else metadata
        self.responses = responses or {}
        self.calls = []

    def call(self, method, path, body=None):
        self.calls.append((method, path))
        if method == 'GET':
            result = self.metadata
        else:
            result = self.responses.get(path, {'acknowledged': True})
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def delete_paths(self):
        return [path for method, path in self.calls if method == 'DELETE']


@pytest.fixture
def credentials():
    return Credentials(
        access_key_id='AKIDEXAMPLE',
        secret_access_key='wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY'
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def fake_client():
    return FakeSearchClient()


@pytest.fixture
def timeout_error():
    return TransportError("DELETE /logs-2024-01-01 failed: timed out")


@pytest.fixture(autouse=True)
def reset_config_manager():
    config_manager.reset()
    yield
    config_manager.reset()
