"""Tests for the Google Docs/Drive REST client."""

import unittest
from unittest.mock import Mock, patch

import requests

from google_client import DOCS_API_BASE, DRIVE_API_BASE, GoogleApiClient


def json_response(payload):
    response = Mock()
    response.status_code = 200
    response.json.return_value = payload
    return response


class TestGoogleApiClient(unittest.TestCase):
    def setUp(self):
        self.session = Mock()
        self.client = GoogleApiClient(session=self.session, timeout=12)

    def test_requires_credentials_or_session(self):
        with self.assertRaises(ValueError):
            GoogleApiClient()

    def test_retry_adapter_is_mounted(self):
        mounted = [c[0][0] for c in self.session.mount.call_args_list]
        self.assertEqual(mounted, ['http://', 'https://'])

    def test_get_document(self):
        self.session.request.return_value = json_response({'title': 'Doc'})

        self.assertEqual(self.client.get_document('abc'), {'title': 'Doc'})
        self.session.request.assert_called_once_with(
            'GET', f"{DOCS_API_BASE}/documents/abc", timeout=12, params=None
        )

    def test_list_files_follows_page_tokens(self):
        self.session.request.side_effect = [
            json_response({'files': [{'id': '1'}], 'nextPageToken': 'tok'}),
            json_response({'files': [{'id': '2'}]}),
        ]

        files = self.client.list_files("'f' in parents")

        self.assertEqual(files, [{'id': '1'}, {'id': '2'}])
        first_params = self.session.request.call_args_list[0][1]['params']
        second_params = self.session.request.call_args_list[1][1]['params']
        self.assertNotIn('pageToken', first_params)
        self.assertEqual(second_params['pageToken'], 'tok')
        self.assertEqual(second_params['q'], "'f' in parents")

    def test_export_revision_returns_text(self):
        response = Mock()
        response.status_code = 200
        response.encoding = None
        response.text = 'revision body'
        self.session.request.return_value = response

        self.assertEqual(self.client.export_revision('d1', 'r1'), 'revision body')
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('GET', f"{DRIVE_API_BASE}/files/d1/export"))
        self.assertEqual(kwargs['params'], {'mimeType': 'text/plain', 'revisionId': 'r1'})

    def test_http_errors_propagate(self):
        response = Mock()
        response.status_code = 404
        response.json.side_effect = ValueError("not json")
        response.text = 'Not Found'
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
        self.session.request.return_value = response

        with self.assertRaises(requests.exceptions.HTTPError):
            self.client.get_file('missing')

    def test_from_config_builds_authorized_session(self):
        config = {'advanced': {'request_timeout': 5, 'max_retries': 1, 'rate_limit': 0.5}}
        credentials = Mock()

        with patch('google_client.AuthorizedSession') as session_cls:
            client = GoogleApiClient.from_config(config, credentials)

        session_cls.assert_called_once_with(credentials)
        self.assertIs(client.session, session_cls.return_value)
        self.assertEqual(client.timeout, 5)
        self.assertEqual(client.max_retries, 1)
        self.assertEqual(client.rate_limit, 0.5)


if __name__ == '__main__':
    unittest.main()
