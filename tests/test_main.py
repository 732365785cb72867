"""
Tests for the command line entry point and its exit codes.
"""
import logging
from unittest.mock import MagicMock, patch

import pytest

from esprune import main as entrypoint
from esprune.core.errors import ApiError, CredentialError
from esprune.core.utils import setup_logging

from conftest import FakeSearchClient

ENV = {
    'AWS_REGION': 'us-east-1',
    'ELASTICSEARCH_URL': 'https://search-logs-abc123.us-east-1.es.amazonaws.com',
}


@pytest.fixture
def network():
    """Patch every collaborator that could touch the network."""
    with patch.object(entrypoint, 'load_dotenv'), \
            patch.object(entrypoint, 'setup_logging'), \
            patch.object(entrypoint, 'CredentialResolver') as resolver, \
            patch.object(entrypoint, 'SearchClient') as search_client:
        resolver.return_value.resolve.return_value = MagicMock()
        yield resolver, search_client


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _exit_code(argv=None):
    with pytest.raises(SystemExit) as exc_info:
        entrypoint.main(argv or [])
    return exc_info.value.code


class TestConfigurationExitCodes:
    """Missing settings stop the run before any network activity."""

    @patch.dict('os.environ', {'ELASTICSEARCH_URL': ENV['ELASTICSEARCH_URL']}, clear=True)
    def test_missing_region_exits_1(self, network, caplog):
        resolver, search_client = network

        with caplog.at_level(logging.ERROR):
            assert _exit_code() == 1

        assert "AWS_REGION not set" in caplog.text
        resolver.assert_not_called()
        search_client.assert_not_called()

    @patch.dict('os.environ', {'AWS_REGION': 'us-east-1'}, clear=True)
    def test_missing_url_exits_2(self, network, caplog):
        resolver, search_client = network

        with caplog.at_level(logging.ERROR):
            assert _exit_code() == 2

        assert "ELASTICSEARCH_URL not set" in caplog.text
        resolver.assert_not_called()
        search_client.assert_not_called()

    @patch.dict('os.environ', {}, clear=True)
    def test_missing_both_reports_region(self, network):
        assert _exit_code() == 1

    @patch.dict('os.environ', {**ENV, 'ESPRUNE_REQUEST_TIMEOUT': 'soon'}, clear=True)
    def test_invalid_setting_exits_100(self, network):
        resolver, _ = network

        assert _exit_code() == 100
        resolver.assert_not_called()

    @pytest.mark.parametrize('content', ["- a\n- b\n", "just a string\n", "42\n"])
    @patch.dict('os.environ', ENV, clear=True)
    def test_config_file_without_mapping_exits_100(self, network, tmp_path, caplog, content):
        resolver, search_client = network
        config_file = tmp_path / 'c.yaml'
        config_file.write_text(content)

        with caplog.at_level(logging.ERROR):
            assert _exit_code(['--config', str(config_file)]) == 100

        assert "must contain a mapping" in caplog.text
        resolver.assert_not_called()
        search_client.assert_not_called()

    @patch.dict('os.environ', ENV, clear=True)
    def test_unwritable_log_file_exits_100(self, network, restore_root_logger, tmp_path):
        resolver, search_client = network
        entrypoint.setup_logging.side_effect = setup_logging
        config_file = tmp_path / 'c.yaml'
        config_file.write_text(f"logging:\n  file: {tmp_path / 'missing' / 'esprune.log'}\n")

        assert _exit_code(['--config', str(config_file)]) == 100

        resolver.assert_not_called()
        search_client.assert_not_called()


class TestRunExitCodes:
    """End-to-end outcomes mapped to exit codes."""

    @patch.dict('os.environ', ENV, clear=True)
    def test_all_acknowledged_exits_0(self, network):
        _, search_client = network
        fake = FakeSearchClient()
        search_client.return_value = fake

        assert _exit_code() == 0
        assert fake.delete_paths == ['/logs-2024-01-01', '/logs-2024-01-02']

    @patch.dict('os.environ', ENV, clear=True)
    def test_unacknowledged_still_exits_0(self, network, caplog):
        _, search_client = network
        fake = FakeSearchClient(responses={'/logs-2024-01-01': {'acknowledged': False}})
        search_client.return_value = fake

        with caplog.at_level(logging.WARNING):
            assert _exit_code() == 0

        assert fake.delete_paths == ['/logs-2024-01-01', '/logs-2024-01-02']
        assert "has not acknowledged the request to delete index 'logs-2024-01-01'" in caplog.text

    @patch.dict('os.environ', ENV, clear=True)
    def test_timeout_exits_100(self, network, timeout_error, caplog):
        _, search_client = network
        fake = FakeSearchClient(responses={'/logs-2024-01-01': timeout_error})
        search_client.return_value = fake

        with caplog.at_level(logging.ERROR):
            assert _exit_code() == 100

        assert fake.delete_paths == ['/logs-2024-01-01']
        assert "Index pruning failed" in caplog.text

    @patch.dict('os.environ', ENV, clear=True)
    def test_metadata_failure_exits_100(self, network):
        _, search_client = network
        search_client.return_value = FakeSearchClient(metadata=ApiError(403, 'forbidden'))

        assert _exit_code() == 100

    @patch.dict('os.environ', ENV, clear=True)
    def test_credential_failure_exits_100(self, network):
        resolver, search_client = network
        resolver.return_value.resolve.side_effect = CredentialError("Unable to locate AWS credentials")

        assert _exit_code() == 100
        search_client.assert_not_called()

    @patch.dict('os.environ', ENV, clear=True)
    def test_unexpected_error_exits_100(self, network):
        _, search_client = network
        search_client.side_effect = RuntimeError("boom")

        assert _exit_code() == 100

    @patch.dict('os.environ', ENV, clear=True)
    def test_client_built_from_config(self, network):
        resolver, search_client = network
        search_client.return_value = FakeSearchClient()

        _exit_code(['--log-level', 'DEBUG'])

        resolver.assert_called_once_with('us-east-1', profile=None)
        es_config, auth = search_client.call_args.args
        assert es_config.url == ENV['ELASTICSEARCH_URL']
        assert isinstance(auth, entrypoint.SignedRequestAuth)
        assert auth.signer.region == 'us-east-1'
        assert auth.signer.service == 'es'


class TestArgumentParser:
    """Test command line parsing."""

    def test_defaults(self):
        args = entrypoint.create_argument_parser().parse_args([])
        assert args.config is None
        assert args.log_level is None

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            entrypoint.create_argument_parser().parse_args(['--log-level', 'LOUD'])
