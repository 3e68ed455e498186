"""Converters package for Google Docs structure to Markdown conversion."""

import logging

from .block_renderer import BlockRenderer, MalformedInputError
from .formatting_consolidator import FormattingConsolidator, MarkerPair, consolidate
from .markdown_converter import DocumentConverter
from .style_renderer import StyleRenderer

logger = logging.getLogger('gdocs_markdown_exporter.converters')


def convert_document(document, image_store=None, logger=None):
    """
    Convenience function to convert a Document to Markdown.

    This orchestrates the full conversion pipeline:
    1. Title heading
    2. Block rendering (paragraphs, lists, tables, section breaks)
    3. Inline style rendering per text run
    4. Image references (and persistence through image_store)
    5. Formatting consolidation

    Args:
        document: Document model from fetchers.DocumentFetcher
        image_store: Optional object with persist(source_uri, destination_path)
        logger: Optional logger instance (uses module logger if not provided)

    Returns:
        Tuple of (markdown, title)

    Example:
        >>> from converters import convert_document
        >>> from models import Document
        >>> convert_document(Document(title='Report'))
        ('# Report\\n\\n', 'Report')
    """
    if logger is None:
        logger = logging.getLogger('gdocs_markdown_exporter.converters')

    converter = DocumentConverter(image_store=image_store, logger=logger)
    return converter.convert(document)


__all__ = [
    'convert_document',
    'consolidate',
    'BlockRenderer',
    'DocumentConverter',
    'FormattingConsolidator',
    'MalformedInputError',
    'MarkerPair',
    'StyleRenderer'
]
