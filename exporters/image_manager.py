"""Image manager for downloading inline document images next to the exported markdown."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests


class ImageError(Exception):
    """Raised when an inline image cannot be downloaded or written."""
    pass


class ImageManager:
    """
    Persists inline images for a single document folder.

    Each call to ``persist`` downloads one image URL and writes the bytes to
    ``output_dir / destination_path``. Images are handled one at a time.
    """

    CHUNK_SIZE = 8192

    def __init__(
        self,
        output_dir: Union[str, Path],
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the image manager.

        Args:
            output_dir: Document folder that receives the images
            session: requests session used for downloads (a plain session if omitted)
            timeout: HTTP request timeout in seconds
            logger: Logger instance
        """
        self.output_dir = Path(output_dir)
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.exporters.image_manager')

        self.stats = {
            'downloaded': 0,
            'failed': 0,
            'total_size_bytes': 0
        }

    def persist(self, source_uri: str, destination_path: str) -> Path:
        """
        Download an image and save it under the output directory.

        Args:
            source_uri: URL of the image content
            destination_path: File name relative to the output directory

        Returns:
            Path of the written file

        Raises:
            ImageError: If the download fails or the file cannot be written
        """
        target = self.output_dir / destination_path
        self.logger.debug(f"Downloading image {source_uri} -> {target}")

        try:
            response = self.session.get(source_uri, stream=True, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.stats['failed'] += 1
            raise ImageError(f"Unable to download image {source_uri}: {e}") from e

        try:
            if response.status_code != 200:
                self.stats['failed'] += 1
                raise ImageError(
                    f"Unable to download image {source_uri}: HTTP {response.status_code}"
                )

            size = 0
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'wb') as f:
                for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        size += len(chunk)

        except requests.exceptions.RequestException as e:
            self.stats['failed'] += 1
            raise ImageError(f"Download of image {source_uri} was interrupted: {e}") from e

        except OSError as e:
            self.stats['failed'] += 1
            raise ImageError(f"Unable to write image {target}: {e}") from e

        finally:
            response.close()

        self.stats['downloaded'] += 1
        self.stats['total_size_bytes'] += size
        self.logger.debug(f"Saved image {target.name} ({size} bytes)")
        return target

    def get_stats(self) -> Dict[str, Any]:
        """Get image download statistics."""
        return self.stats.copy()


__all__ = ['ImageError', 'ImageManager']
