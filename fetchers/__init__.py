"""Fetchers package for retrieving Google Docs and their Drive metadata."""

from .base_fetcher import BaseFetcher, FetchError
from .document_fetcher import DocumentFetcher, parse_document
from .drive_fetcher import DriveFetcher


class FetcherFactory:
    """Factory for creating the fetchers bound to one API client."""

    @staticmethod
    def create_fetchers(client, logger=None):
        """Create document and Drive fetchers.

        Args:
            client: GoogleApiClient instance
            logger: Logger instance

        Returns:
            Tuple of (DocumentFetcher, DriveFetcher)
        """
        return DocumentFetcher(client, logger), DriveFetcher(client, logger)


__all__ = [
    'BaseFetcher',
    'DocumentFetcher',
    'DriveFetcher',
    'FetchError',
    'FetcherFactory',
    'parse_document'
]
