"""Base fetcher and common error handling for Google API fetchers."""

import logging
from typing import Any, Callable, Optional, TypeVar

import requests

T = TypeVar('T')


class FetchError(Exception):
    """Raised when a document or its Drive metadata cannot be retrieved."""
    pass


class BaseFetcher:
    """Common functionality for fetchers built on a GoogleApiClient."""

    def __init__(self, client: Any, logger: Optional[logging.Logger] = None):
        """
        Initialize base fetcher with an API client and logger.

        Args:
            client: GoogleApiClient instance
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.client = client
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.fetcher')

    def _call(self, description: str, operation: Callable[..., T], *args: Any) -> T:
        """
        Run a client operation, translating transport failures into FetchError.

        Args:
            description: Human-readable description used in the error message
            operation: Client method to call
            *args: Arguments passed to the operation

        Returns:
            The operation's result

        Raises:
            FetchError: If the request failed or returned an error status
        """
        try:
            return operation(*args)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Unable to {description}: {e}") from e


__all__ = ['BaseFetcher', 'FetchError']
