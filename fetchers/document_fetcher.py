"""Fetch Google Docs and translate Docs API payloads into the document model."""

import logging
from typing import Any, Dict, List, Optional

from converters.block_renderer import MalformedInputError
from models import (
    Block,
    Bullet,
    Document,
    InlineImage,
    Link,
    ListDefinition,
    Paragraph,
    ParagraphStyle,
    SectionBreak,
    Table,
    TableCell,
    TableRow,
    TextRun,
    TextStyle,
)
from .base_fetcher import BaseFetcher

logger = logging.getLogger('gdocs_markdown_exporter.fetcher.document')


class DocumentFetcher(BaseFetcher):
    """Retrieve a document by ID and build its Document model."""

    def fetch_document(self, document_id: str) -> Document:
        """
        Fetch and parse a single document.

        Args:
            document_id: Google Docs document ID

        Returns:
            Parsed Document

        Raises:
            FetchError: If the Docs API request fails
            MalformedInputError: If the payload lacks a title or body
        """
        self.logger.info(f"Retrieving document with ID: {document_id}")
        payload = self._call('retrieve document', self.client.get_document, document_id)
        return parse_document(payload)


def parse_document(payload: Dict[str, Any]) -> Document:
    """
    Translate a Docs API document resource into a Document.

    Args:
        payload: JSON resource returned by documents.get

    Returns:
        Document with blocks in body order

    Raises:
        MalformedInputError: If the title or body is missing
    """
    if 'title' not in payload or not isinstance(payload.get('body'), dict):
        raise MalformedInputError("Document payload is missing its title or body")

    return Document(
        title=payload['title'],
        blocks=_parse_content(payload['body'].get('content', [])),
        inline_images=_parse_inline_images(payload.get('inlineObjects', {})),
        lists=_parse_lists(payload.get('lists', {})),
        document_id=payload.get('documentId')
    )


def _parse_content(content: List[Dict[str, Any]]) -> List[Block]:
    blocks: List[Block] = []
    for element in content:
        if 'paragraph' in element:
            blocks.append(_parse_paragraph(element['paragraph']))
        elif 'table' in element:
            blocks.append(_parse_table(element['table']))
        elif 'sectionBreak' in element:
            blocks.append(SectionBreak())
        else:
            skipped = next((key for key in element if key not in ('startIndex', 'endIndex')), 'unknown')
            logger.debug(f"Skipping unsupported structural element: {skipped}")
    return blocks


def _parse_paragraph(paragraph: Dict[str, Any]) -> Paragraph:
    runs = []
    for element in paragraph.get('elements', []):
        text_run = element.get('textRun')
        if text_run is None:
            continue
        runs.append(TextRun(
            content=text_run.get('content', ''),
            style=_parse_text_style(text_run.get('textStyle'))
        ))

    return Paragraph(runs=runs, style=_parse_paragraph_style(paragraph))


def _parse_paragraph_style(paragraph: Dict[str, Any]) -> Optional[ParagraphStyle]:
    named_style = (paragraph.get('paragraphStyle') or {}).get('namedStyleType')
    bullet = paragraph.get('bullet')

    if named_style is None and bullet is None:
        return None

    return ParagraphStyle(
        named_style=named_style,
        bullet=Bullet(list_id=bullet.get('listId', '')) if bullet is not None else None
    )


def _parse_text_style(style: Optional[Dict[str, Any]]) -> Optional[TextStyle]:
    if style is None:
        return None

    link = style.get('link')
    return TextStyle(
        bold=bool(style.get('bold', False)),
        italic=bool(style.get('italic', False)),
        underline=bool(style.get('underline', False)),
        strikethrough=bool(style.get('strikethrough', False)),
        link=Link(url=link.get('url', '')) if link else None
    )


def _parse_table(table: Dict[str, Any]) -> Table:
    rows = []
    for row in table.get('tableRows', []):
        cells = [
            TableCell(blocks=_parse_content(cell.get('content', [])))
            for cell in row.get('tableCells', [])
        ]
        rows.append(TableRow(cells=cells))
    return Table(rows=rows)


def _parse_inline_images(inline_objects: Dict[str, Any]) -> Dict[str, InlineImage]:
    images = {}
    for object_id, inline_object in inline_objects.items():
        embedded = (inline_object.get('inlineObjectProperties') or {}).get('embeddedObject') or {}
        image_properties = embedded.get('imageProperties')
        if image_properties is None:
            logger.debug(f"Inline object {object_id} is not an image - skipping")
            continue
        images[object_id] = InlineImage(source_uri=image_properties.get('contentUri', ''))
    return images


def _parse_lists(lists: Dict[str, Any]) -> Dict[str, ListDefinition]:
    definitions = {}
    for list_id, list_resource in lists.items():
        nesting_levels = (list_resource.get('listProperties') or {}).get('nestingLevels') or [{}]
        definitions[list_id] = ListDefinition(glyph_type=nesting_levels[0].get('glyphType'))
    return definitions


__all__ = ['DocumentFetcher', 'parse_document']
