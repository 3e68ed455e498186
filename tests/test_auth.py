"""Tests for OAuth credential loading and caching."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from google.auth.exceptions import RefreshError

from auth import AuthError, load_credentials, save_credentials


class TestLoadCredentials(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.token_path = Path(self.tmp.name) / 'creds' / 'token.json'
        self.config = {
            'google': {
                'client_id': 'id',
                'client_secret': 'secret',
                'redirect_uri': '${GOOGLE_REDIRECT_URI}',
                'redirect_port': 8080,
                'token_file': str(self.token_path),
                'scopes': ['scope-a'],
            }
        }

    def cache_token(self):
        self.token_path.parent.mkdir(parents=True)
        self.token_path.write_text('{}')

    @patch('auth.Credentials')
    def test_valid_cached_token_is_reused(self, credentials_cls):
        self.cache_token()
        cached = Mock(valid=True)
        credentials_cls.from_authorized_user_file.return_value = cached

        self.assertIs(load_credentials(self.config), cached)
        credentials_cls.from_authorized_user_file.assert_called_once_with(str(self.token_path), ['scope-a'])

    @patch('auth.Request')
    @patch('auth.Credentials')
    def test_expired_token_is_refreshed_and_saved(self, credentials_cls, request_cls):
        self.cache_token()
        cached = Mock(valid=False, expired=True, refresh_token='r')
        cached.to_json.return_value = '{"token": "new"}'
        credentials_cls.from_authorized_user_file.return_value = cached

        self.assertIs(load_credentials(self.config), cached)
        cached.refresh.assert_called_once_with(request_cls.return_value)
        self.assertEqual(self.token_path.read_text(), '{"token": "new"}')

    @patch('auth.InstalledAppFlow')
    @patch('auth.Request')
    @patch('auth.Credentials')
    def test_failed_refresh_falls_back_to_browser_flow(self, credentials_cls, request_cls, flow_cls):
        self.cache_token()
        cached = Mock(valid=False, expired=True, refresh_token='r')
        cached.refresh.side_effect = RefreshError('revoked')
        credentials_cls.from_authorized_user_file.return_value = cached
        fresh = Mock()
        fresh.to_json.return_value = '{"token": "fresh"}'
        flow_cls.from_client_config.return_value.run_local_server.return_value = fresh

        self.assertIs(load_credentials(self.config), fresh)
        self.assertEqual(self.token_path.read_text(), '{"token": "fresh"}')

    @patch('auth.InstalledAppFlow')
    def test_missing_token_runs_flow_on_configured_port(self, flow_cls):
        fresh = Mock()
        fresh.to_json.return_value = '{}'
        flow_cls.from_client_config.return_value.run_local_server.return_value = fresh

        load_credentials(self.config)

        client_config, scopes = flow_cls.from_client_config.call_args[0]
        self.assertEqual(client_config['installed']['client_id'], 'id')
        self.assertEqual(scopes, ['scope-a'])
        run_kwargs = flow_cls.from_client_config.return_value.run_local_server.call_args[1]
        self.assertEqual(run_kwargs['port'], 8080)

    @patch('auth.InstalledAppFlow')
    def test_redirect_uri_port_takes_precedence(self, flow_cls):
        self.config['google']['redirect_uri'] = 'http://localhost:9090/'
        flow_cls.from_client_config.return_value.run_local_server.return_value.to_json.return_value = '{}'

        load_credentials(self.config)

        run_kwargs = flow_cls.from_client_config.return_value.run_local_server.call_args[1]
        self.assertEqual(run_kwargs['port'], 9090)

    @patch('auth.InstalledAppFlow')
    def test_flow_failure_raises_auth_error(self, flow_cls):
        flow_cls.from_client_config.return_value.run_local_server.side_effect = OSError('port in use')

        with self.assertRaises(AuthError):
            load_credentials(self.config)


class TestSaveCredentials(unittest.TestCase):
    def test_creates_parent_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            token_path = Path(tmp) / 'nested' / 'token.json'
            credentials = Mock()
            credentials.to_json.return_value = '{"refresh_token": "x"}'

            save_credentials(credentials, token_path)

            self.assertEqual(token_path.read_text(encoding='utf-8'), '{"refresh_token": "x"}')


if __name__ == '__main__':
    unittest.main()
