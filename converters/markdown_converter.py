"""Document to Markdown conversion orchestrator."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from models import Document
from .block_renderer import BlockRenderer
from .formatting_consolidator import FormattingConsolidator
from .style_renderer import StyleRenderer

logger = logging.getLogger('gdocs_markdown_exporter.converters.markdownconverter')


IMAGE_FILENAME_TEMPLATE = 'image{index}.jpg'


class DocumentConverter:
    """
    Main orchestrator for converting a structured Document into Markdown.

    The converter:
    - Emits the document title as a top-level heading
    - Renders every body block in order through a BlockRenderer
    - Appends a reference for every inline image after the body and asks the
      image store to persist its bytes under a sequential file name
    - Runs the FormattingConsolidator over the assembled text

    The image store is any object with ``persist(source_uri, destination_path)``
    (see ``exporters.ImageManager``). Failures raised by it abort the conversion.
    """

    def __init__(
        self,
        image_store: Any = None,
        logger: Optional[logging.Logger] = None,
        consolidator: Optional[FormattingConsolidator] = None,
        style_renderer: Optional[StyleRenderer] = None
    ):
        """
        Initialize document converter.

        Args:
            image_store: Collaborator persisting image bytes, or None to only
                emit image references
            logger: Logger instance
            consolidator: FormattingConsolidator applied to the output
            style_renderer: StyleRenderer shared by block renderers
        """
        self.image_store = image_store
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.converters.markdownconverter')
        self.consolidator = consolidator or FormattingConsolidator(logger=self.logger)
        self.style_renderer = style_renderer or StyleRenderer()

        self.stats = {
            'documents_converted': 0,
            'blocks_rendered': 0,
            'images_referenced': 0
        }

    def convert(self, document: Document) -> Tuple[str, str]:
        """
        Convert a document to Markdown.

        Args:
            document: Document fetched from the Docs API

        Returns:
            Tuple of (markdown, title)

        Raises:
            MalformedInputError: If the document is internally inconsistent
            ImageError: If an image cannot be downloaded or saved
        """
        self.logger.info(f"Converting document '{document.title}' to markdown")

        parts = [f"# {document.title}\n\n"]

        block_renderer = BlockRenderer(
            lists=document.lists,
            style_renderer=self.style_renderer,
            logger=self.logger
        )
        for block in document.blocks:
            parts.append(block_renderer.render(block))

        parts.extend(self._render_images(document))

        markdown = self.consolidator.consolidate(''.join(parts))

        self.stats['documents_converted'] += 1
        self.stats['blocks_rendered'] += len(document.blocks)
        self.logger.debug(
            f"Document '{document.title}': {len(document.blocks)} blocks, "
            f"{len(document.inline_images)} images, {len(markdown)} characters"
        )

        return markdown, document.title

    def _render_images(self, document: Document) -> List[str]:
        """Persist each inline image and return its Markdown reference, in map order."""
        references = []
        image_index = 1

        for image_id, image in document.inline_images.items():
            filename = IMAGE_FILENAME_TEMPLATE.format(index=image_index)
            image_index += 1

            if self.image_store is not None:
                self.logger.debug(f"Persisting image {image_id} as {filename}")
                self.image_store.persist(image.source_uri, filename)
            else:
                self.logger.debug(f"No image store configured - skipping download of {image_id}")

            references.append(f"![Image]({filename})\n\n")
            self.stats['images_referenced'] += 1

        return references

    def get_stats(self) -> Dict[str, int]:
        """Get conversion statistics."""
        return self.stats.copy()


__all__ = ['DocumentConverter', 'IMAGE_FILENAME_TEMPLATE']
