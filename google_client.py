"""Google Docs and Drive REST API client with retry logic and rate limiting."""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from google.auth.transport.requests import AuthorizedSession
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger('gdocs_markdown_exporter.client')

DOCS_API_BASE = 'https://docs.googleapis.com/v1'
DRIVE_API_BASE = 'https://www.googleapis.com/drive/v3'

GOOGLE_DOC_MIME_TYPE = 'application/vnd.google-apps.document'


class GoogleApiClient:
    """Google Docs/Drive REST API client with authentication, retry logic, and error handling."""

    def __init__(
        self,
        credentials=None,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        rate_limit: float = 0.0
    ):
        """
        Initialize the client with an authorized session and retry configuration.

        Args:
            credentials: google.auth credentials used to authorize requests
            session: Pre-built requests session (overrides credentials)
            timeout: HTTP request timeout in seconds
            max_retries: Maximum retry attempts for transient errors
            retry_backoff_factor: Exponential backoff factor
            rate_limit: Minimum seconds between requests (0.0 = no rate limiting)
        """
        if session is None:
            if credentials is None:
                raise ValueError("GoogleApiClient requires credentials or a session")
            session = AuthorizedSession(credentials)

        self.session = session
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_factor = retry_backoff_factor
        self.rate_limit = rate_limit
        self.last_request_time = 0.0

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=retry_backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(f"Client configured with timeout={timeout}s, max_retries={max_retries}, "
                     f"backoff_factor={retry_backoff_factor}, rate_limit={rate_limit}s")

    @classmethod
    def from_config(cls, config: Dict[str, Any], credentials) -> 'GoogleApiClient':
        """Build a client from the advanced.* configuration section."""
        advanced = config.get('advanced', {})
        return cls(
            credentials=credentials,
            timeout=advanced.get('request_timeout', 30),
            max_retries=advanced.get('max_retries', 3),
            retry_backoff_factor=advanced.get('retry_backoff_factor', 2.0),
            rate_limit=advanced.get('rate_limit', 0.0)
        )

    def _enforce_rate_limit(self) -> None:
        """Enforce rate limiting if configured."""
        if self.rate_limit <= 0:
            return

        time_since_last = time.time() - self.last_request_time

        if time_since_last < self.rate_limit:
            sleep_time = self.rate_limit - time_since_last
            logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f}s")
            time.sleep(sleep_time)

    def _make_request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make HTTP request with rate limiting and error logging.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Full request URL
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            requests.exceptions.HTTPError: For HTTP errors
            requests.exceptions.Timeout: For timeout errors
            requests.exceptions.RequestException: For other request errors
        """
        self._enforce_rate_limit()

        start_time = time.time()
        logger.debug(f"API Request: {method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            elapsed = time.time() - start_time
            logger.debug(f"API Response: {response.status_code} {url} ({elapsed:.3f}s)")

            response.raise_for_status()
            return response

        except requests.exceptions.Timeout:
            logger.error(f"Request timeout after {self.timeout}s: {method} {url}")
            raise

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"HTTP Error {status_code}: {method} {url}")

            if e.response is not None:
                try:
                    error_data = e.response.json()
                    logger.error(f"Error details: {json.dumps(error_data, indent=2)}")
                except ValueError:
                    logger.error(f"Error response: {e.response.text[:500]}")

            raise

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url} - {str(e)}")
            raise

        finally:
            self.last_request_time = time.time()

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._make_request('GET', url, params=params).json()

    def _get_paginated(self, url: str, params: Dict[str, Any], items_key: str) -> List[Dict[str, Any]]:
        """Follow nextPageToken until every page of `items_key` has been collected."""
        items: List[Dict[str, Any]] = []
        page_params = dict(params)

        while True:
            data = self._get_json(url, params=page_params)
            items.extend(data.get(items_key, []))

            next_token = data.get('nextPageToken')
            if not next_token:
                break
            # Fresh dict per page; callers may hold on to the previous one
            page_params = {**params, 'pageToken': next_token}

        logger.debug(f"Fetched {len(items)} {items_key} from {url}")
        return items

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch a document's structured representation.

        Args:
            document_id: Google Docs document ID

        Returns:
            Docs API document resource
        """
        return self._get_json(f"{DOCS_API_BASE}/documents/{document_id}")

    def get_file(self, file_id: str, fields: str = 'id, name') -> Dict[str, Any]:
        """Fetch Drive file metadata restricted to `fields`."""
        return self._get_json(f"{DRIVE_API_BASE}/files/{file_id}", params={'fields': fields})

    def list_files(self, query: str, fields: str = 'files(id, name)') -> List[Dict[str, Any]]:
        """List Drive files matching a search query, across all result pages."""
        params = {
            'q': query,
            'fields': f"nextPageToken, {fields}",
            'pageSize': 100,
        }
        return self._get_paginated(f"{DRIVE_API_BASE}/files", params, 'files')

    def list_comments(self, file_id: str) -> List[Dict[str, Any]]:
        """List the comments of a file."""
        params = {
            'fields': 'nextPageToken, comments(content,author(displayName,emailAddress),createdTime)',
            'pageSize': 100,
        }
        return self._get_paginated(f"{DRIVE_API_BASE}/files/{file_id}/comments", params, 'comments')

    def list_revisions(self, file_id: str) -> List[Dict[str, Any]]:
        """List the revisions of a file."""
        params = {
            'fields': 'nextPageToken, revisions(id,modifiedTime,lastModifyingUser(displayName,emailAddress))',
            'pageSize': 200,
        }
        return self._get_paginated(f"{DRIVE_API_BASE}/files/{file_id}/revisions", params, 'revisions')

    def export_revision(self, file_id: str, revision_id: str, mime_type: str = 'text/plain') -> str:
        """Export the content of one revision of a Google Doc."""
        response = self._make_request(
            'GET',
            f"{DRIVE_API_BASE}/files/{file_id}/export",
            params={'mimeType': mime_type, 'revisionId': revision_id}
        )
        response.encoding = response.encoding or 'utf-8'
        return response.text


__all__ = ['GoogleApiClient', 'DOCS_API_BASE', 'DRIVE_API_BASE', 'GOOGLE_DOC_MIME_TYPE']
