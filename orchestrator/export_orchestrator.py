"""
Export orchestrator for coordinating a Drive folder export.

This module sequences the export of one folder:
Resolve folder → List documents → Export each document → Summary.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from tqdm import tqdm

from exporters import MarkdownExporter, sanitize_filename
from fetchers import DriveFetcher, FetcherFactory
from logger import log_section, ProgressTracker

logger = logging.getLogger('gdocs_markdown_exporter.orchestrator')


class ExportOrchestrator:
    """Central coordinator exporting every Google Doc of a Drive folder."""

    def __init__(self, config: Dict[str, Any], client, logger: Optional[logging.Logger] = None):
        """
        Initialize export orchestrator.

        Args:
            config: Configuration dictionary
            client: GoogleApiClient instance
            logger: Optional logger instance
        """
        self.config = config
        self.client = client
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.orchestrator')

        export_config = config.get('export', {})
        self.output_directory = Path(export_config.get('output_directory', '.'))
        self.continue_on_error = export_config.get('continue_on_error', False)

        self.document_fetcher, self.drive_fetcher = FetcherFactory.create_fetchers(client, self.logger)
        self.exporter = MarkdownExporter(
            config,
            self.document_fetcher,
            self.drive_fetcher,
            image_session=getattr(client, 'session', None),
            logger=self.logger
        )

        self.logger.info(
            f"ExportOrchestrator initialized with output: {self.output_directory}, "
            f"continue_on_error: {self.continue_on_error}"
        )

    def run(self, folder_url: str) -> Dict[str, Any]:
        """
        Export every document of a Drive folder.

        Args:
            folder_url: Google Drive folder URL

        Returns:
            Export statistics dictionary

        Raises:
            ValueError: If the URL is not a Drive folder URL
            FetchError, MalformedInputError, ImageError, OSError: On the first
                document failure when continue_on_error is disabled
        """
        start_time = time.time()

        folder_id = DriveFetcher.extract_folder_id(folder_url)
        if folder_id is None:
            raise ValueError(f"Invalid Google Drive folder URL: {folder_url}")

        log_section("Resolving Folder")
        folder_name = self.drive_fetcher.get_folder_name(folder_id)
        files = self.drive_fetcher.list_documents(folder_id)

        # Drive names may contain separators or start with one
        base_dir = self.output_directory / sanitize_filename(folder_name)
        base_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Exporting folder '{folder_name}' to {base_dir}")

        stats = {
            'folder_id': folder_id,
            'folder_name': folder_name,
            'output_dir': str(base_dir),
            'documents_total': len(files),
            'documents_success': 0,
            'documents_failed': 0,
            'errors': []
        }

        if not files:
            self.logger.warning(f"No Google Docs found in folder '{folder_name}'")
            stats['duration'] = time.time() - start_time
            return stats

        log_section("Exporting Documents")
        with ProgressTracker(total_items=len(files), item_type='documents') as tracker:
            for file in tqdm(files, desc="Exporting", unit="doc"):
                try:
                    result = self.exporter.export_document(file, base_dir)
                    stats['documents_success'] += 1
                    tracker.increment(success=True)
                    self.logger.debug(
                        f"Exported '{result['title']}' with {len(result['revisions'])} revision(s), "
                        f"{result['comments']} comment(s) and {result['images']} image(s)"
                    )

                except Exception as e:
                    self.logger.error(f"Failed to export document '{file.name}' (ID: {file.id}): {str(e)}")
                    if not self.continue_on_error:
                        raise
                    stats['documents_failed'] += 1
                    stats['errors'].append({
                        'document_id': file.id,
                        'document_name': file.name,
                        'error': str(e)
                    })
                    tracker.increment(success=False)

        stats['exporter'] = self.exporter.get_stats()
        stats['duration'] = time.time() - start_time
        self._log_summary(stats)
        return stats

    def _log_summary(self, stats: Dict[str, Any]) -> None:
        """Log final export statistics."""
        log_section("Export Summary")
        self.logger.info(f"Folder: {stats['folder_name']}")
        self.logger.info(f"Documents exported: {stats['documents_success']}/{stats['documents_total']}")
        self.logger.info(f"Documents failed: {stats['documents_failed']}")
        exporter_stats = stats.get('exporter', {})
        self.logger.info(f"Revisions written: {exporter_stats.get('revisions_exported', 0)}")
        self.logger.info(f"Images saved: {exporter_stats.get('images_saved', 0)}")
        self.logger.info(f"Output directory: {stats['output_dir']}")
        self.logger.info(f"Duration: {stats['duration']:.1f}s")


__all__ = ['ExportOrchestrator']
