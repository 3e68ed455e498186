"""Drive folder listing, comments and revision history."""

import re
from typing import List, Optional

from google_client import GOOGLE_DOC_MIME_TYPE
from models import DocumentComment, DocumentRevision, DriveFile
from .base_fetcher import BaseFetcher

FOLDER_URL_PATTERN = re.compile(
    r'^https://drive\.google\.com/drive/(u/\d+/)?folders/([a-zA-Z0-9_-]+)$'
)


class DriveFetcher(BaseFetcher):
    """Fetch Drive metadata surrounding the documents of a folder."""

    @staticmethod
    def extract_folder_id(url: str) -> Optional[str]:
        """
        Extract the folder ID from a Google Drive folder URL.

        Args:
            url: URL such as https://drive.google.com/drive/folders/<id>

        Returns:
            Folder ID, or None if the URL is not a folder URL
        """
        match = FOLDER_URL_PATTERN.match(url.strip())
        if match:
            return match.group(2)
        return None

    def get_folder_name(self, folder_id: str) -> str:
        """Return the display name of a Drive folder."""
        folder = self._call('retrieve folder name', self.client.get_file, folder_id, 'name')
        return folder['name']

    def list_documents(self, folder_id: str) -> List[DriveFile]:
        """List the Google Docs directly inside a folder."""
        query = (
            f"'{folder_id}' in parents and mimeType = '{GOOGLE_DOC_MIME_TYPE}' "
            f"and trashed = false"
        )
        files = self._call('list files in folder', self.client.list_files, query)
        self.logger.info(f"Found {len(files)} document(s) in folder {folder_id}")
        return [DriveFile(id=f['id'], name=f.get('name', '')) for f in files]

    def fetch_comments(self, file_id: str) -> List[DocumentComment]:
        """Fetch the comments of a document."""
        comments = self._call('retrieve comments', self.client.list_comments, file_id)
        return [
            DocumentComment(
                content=comment.get('content', ''),
                author_name=comment.get('author', {}).get('displayName', ''),
                author_email=comment.get('author', {}).get('emailAddress', ''),
                created_time=comment.get('createdTime', '')
            )
            for comment in comments
        ]

    def fetch_revisions(self, file_id: str) -> List[DocumentRevision]:
        """Fetch the revision history of a document."""
        revisions = self._call('retrieve revisions', self.client.list_revisions, file_id)
        return [
            DocumentRevision(
                id=revision['id'],
                modified_time=revision.get('modifiedTime', ''),
                modifier_name=revision.get('lastModifyingUser', {}).get('displayName', ''),
                modifier_email=revision.get('lastModifyingUser', {}).get('emailAddress', '')
            )
            for revision in revisions
        ]

    def fetch_revision_content(self, file_id: str, revision_id: str) -> str:
        """Fetch one revision exported as plain text."""
        return self._call(
            'retrieve document revision', self.client.export_revision, file_id, revision_id
        )


__all__ = ['DriveFetcher', 'FOLDER_URL_PATTERN']
