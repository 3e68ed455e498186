"""Markdown exporter writing one folder per Google Doc with comments and revisions."""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from dateutil import parser as date_parser

from converters import DocumentConverter, FormattingConsolidator
from models import DocumentComment, DocumentRevision, DriveFile
from .image_manager import ImageManager

REVISION_TIMESTAMP_FORMAT = '%Y%m%dT%H%M%S'
COMMENTS_HEADER = "\n\n## COMMENTS:\n"


def save_markdown(content: str, folder: Union[str, Path], filename: str) -> Path:
    """
    Write markdown content to `folder/filename`, creating the folder if needed.

    Args:
        content: Markdown text
        folder: Destination directory
        filename: File name inside the directory

    Returns:
        Path of the written file
    """
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    file_path = folder / filename
    file_path.write_text(content, encoding='utf-8')
    return file_path


def sanitize_filename(title: str) -> str:
    """
    Convert a document or folder title to a single safe path component.

    Args:
        title: Title as reported by Drive

    Returns:
        Name without path separators, never empty
    """
    if not title:
        return "untitled"

    # Replace path separators, reserved and control characters
    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '-', title)

    sanitized = re.sub(r'\s+', ' ', sanitized).strip(' .')

    max_len = 100
    if len(sanitized) > max_len:
        sanitized = sanitized[:max_len].rstrip(' .')

    if not sanitized:
        sanitized = "untitled"

    return sanitized


def format_comments(comments: List[DocumentComment]) -> str:
    """Render the comments section appended to an exported document.

    A document without comments gets no section at all.
    """
    if not comments:
        return ''

    lines = [COMMENTS_HEADER]
    for i, comment in enumerate(comments, start=1):
        lines.append(
            f"**Comment {i} by {comment.author_name} ({comment.author_email}) "
            f"on {comment.created_time}**: {comment.content}\n"
        )
    return ''.join(lines)


def format_revision_header(revision: DocumentRevision) -> str:
    """Render the metadata block that starts every revision file."""
    return (
        f"**Revision ID:** {revision.id}\n"
        f"**Modified Time:** {revision.modified_time}\n"
        f"**Modified By:** {revision.modifier_name} ({revision.modifier_email})\n\n"
    )


class MarkdownExporter:
    """
    Exports Google Docs to local markdown folders.

    For every document the exporter:
    1. Fetches and converts the document, downloading its inline images
    2. Appends the document comments (optional)
    3. Writes document.md into a folder named after the document title
    4. Writes one markdown file per revision (optional)
    """

    def __init__(
        self,
        config: Dict[str, Any],
        document_fetcher,
        drive_fetcher,
        image_session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the markdown exporter.

        Args:
            config: Configuration dictionary with export settings
            document_fetcher: DocumentFetcher used to retrieve documents
            drive_fetcher: DriveFetcher used for comments and revisions
            image_session: Session used for image downloads
            logger: Logger instance
        """
        self.config = config
        self.document_fetcher = document_fetcher
        self.drive_fetcher = drive_fetcher
        self.image_session = image_session
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.exporters.markdown_exporter')

        export_config = config.get('export', {})
        self.document_filename = export_config.get('document_filename', 'document.md')
        self.include_comments = export_config.get('include_comments', True)
        self.include_revisions = export_config.get('include_revisions', True)
        self.download_images = export_config.get('download_images', True)
        self.request_timeout = config.get('advanced', {}).get('request_timeout', 30)

        self.consolidator = FormattingConsolidator(logger=self.logger)

        self.stats = {
            'documents_exported': 0,
            'revisions_exported': 0,
            'comments_exported': 0,
            'images_saved': 0
        }

    def export_document(self, file: DriveFile, base_dir: Union[str, Path]) -> Dict[str, Any]:
        """
        Export one document, its comments and its revisions.

        Args:
            file: Drive file describing the document
            base_dir: Folder that receives the document's own folder

        Returns:
            Dictionary describing what was written

        Raises:
            FetchError: If the document or its metadata cannot be retrieved
            MalformedInputError: If the document payload is inconsistent
            ImageError: If an inline image cannot be saved
            OSError: If a markdown file cannot be written
        """
        document = self.document_fetcher.fetch_document(file.id)
        document_dir = Path(base_dir) / sanitize_filename(document.title)

        image_manager = None
        if self.download_images:
            image_manager = ImageManager(
                document_dir,
                session=self.image_session,
                timeout=self.request_timeout,
                logger=self.logger
            )

        converter = DocumentConverter(
            image_store=image_manager,
            logger=self.logger,
            consolidator=self.consolidator
        )
        markdown, title = converter.convert(document)

        comment_count = 0
        if self.include_comments:
            comments = self.drive_fetcher.fetch_comments(file.id)
            markdown += format_comments(comments)
            comment_count = len(comments)

        document_path = save_markdown(markdown, document_dir, self.document_filename)
        self.logger.info(f"Saved document '{title}' to {document_path}")

        revision_paths = []
        if self.include_revisions:
            revision_paths = self._export_revisions(file, document_dir)

        images_saved = image_manager.get_stats()['downloaded'] if image_manager else 0
        self.stats['documents_exported'] += 1
        self.stats['comments_exported'] += comment_count
        self.stats['revisions_exported'] += len(revision_paths)
        self.stats['images_saved'] += images_saved

        return {
            'title': title,
            'path': document_path,
            'revisions': revision_paths,
            'comments': comment_count,
            'images': images_saved
        }

    def _export_revisions(self, file: DriveFile, document_dir: Path) -> List[Path]:
        """Write every revision of a document as its own markdown file."""
        revisions = self.drive_fetcher.fetch_revisions(file.id)
        self.logger.debug(f"Document '{file.name}' has {len(revisions)} revision(s)")

        paths = []
        for revision in revisions:
            content = self.drive_fetcher.fetch_revision_content(file.id, revision.id)
            markdown = self.consolidator.consolidate(format_revision_header(revision) + content)
            filename = f"{self._revision_timestamp(revision)}_{revision.id}.md"
            paths.append(save_markdown(markdown, document_dir, filename))
            self.logger.debug(f"Saved revision {revision.id} as {filename}")

        return paths

    def _revision_timestamp(self, revision: DocumentRevision) -> str:
        """Format the revision's modified time for use in a file name."""
        if revision.modified_time:
            try:
                return date_parser.isoparse(revision.modified_time).strftime(REVISION_TIMESTAMP_FORMAT)
            except ValueError:
                self.logger.warning(
                    f"Unparseable modified time '{revision.modified_time}' "
                    f"for revision {revision.id}"
                )
        return datetime.now().strftime(REVISION_TIMESTAMP_FORMAT)

    def get_stats(self) -> Dict[str, int]:
        """Get export statistics."""
        return self.stats.copy()


__all__ = [
    'MarkdownExporter',
    'format_comments',
    'format_revision_header',
    'sanitize_filename',
    'save_markdown',
]
