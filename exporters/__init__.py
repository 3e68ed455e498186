"""Exporters for writing converted Google Docs to local markdown folders."""

from .image_manager import ImageError, ImageManager
from .markdown_exporter import MarkdownExporter, sanitize_filename, save_markdown

__all__ = ['ImageError', 'ImageManager', 'MarkdownExporter', 'sanitize_filename', 'save_markdown']
