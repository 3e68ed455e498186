"""Rendering of structural document blocks into Markdown fragments."""

import logging
from typing import Callable, Dict, List, Mapping, Optional

from models import (
    Block,
    BlockKind,
    ListDefinition,
    Paragraph,
    SectionBreak,
    Table,
    TableCell,
    TextRun,
)
from .style_renderer import StyleRenderer


class MalformedInputError(ValueError):
    """Raised when a document references structures it does not declare."""
    pass


ORDERED_LIST_PREFIX = '1. '
UNORDERED_LIST_PREFIX = '- '
PARAGRAPH_SEPARATOR = '\n\n'
HORIZONTAL_RULE = '\n---\n'


class BlockRenderer:
    """
    Convert one structural block (paragraph, table or section break) into Markdown.

    Text runs are delegated to a StyleRenderer. List prefixes are looked up
    in the document's list definitions, so a renderer is bound to one document.
    """

    def __init__(
        self,
        lists: Optional[Mapping[str, ListDefinition]] = None,
        style_renderer: Optional[StyleRenderer] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.lists = lists or {}
        self.style_renderer = style_renderer or StyleRenderer()
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.converters.block_renderer')

        self._handlers: Dict[BlockKind, Callable[[Block], str]] = {
            BlockKind.PARAGRAPH: self._render_paragraph,
            BlockKind.TABLE: self._render_table,
            BlockKind.SECTION_BREAK: self._render_section_break,
        }

    def render(self, block: Block) -> str:
        """
        Render a block to its Markdown fragment.

        Args:
            block: Paragraph, Table or SectionBreak

        Returns:
            Markdown fragment including its trailing separators

        Raises:
            MalformedInputError: If the block kind is unknown or a bullet
                references an undeclared list
        """
        kind = getattr(block, 'kind', None)
        handler = self._handlers.get(kind)
        if handler is None:
            raise MalformedInputError(f"Unsupported block type: {type(block).__name__}")
        return handler(block)

    def render_runs(self, runs: List[TextRun]) -> str:
        """Render text runs, trimming trailing spaces of each so no hard line break is emitted."""
        return ''.join(
            self.style_renderer.render(run.content, run.style).rstrip(' ')
            for run in runs
        )

    def _render_paragraph(self, paragraph: Paragraph) -> str:
        return f"{self._paragraph_prefix(paragraph)}{self.render_runs(paragraph.runs)}{PARAGRAPH_SEPARATOR}"

    def _paragraph_prefix(self, paragraph: Paragraph) -> str:
        style = paragraph.style
        if style is None:
            return ''

        if style.is_heading:
            return '#' * style.heading_level + ' '

        if style.bullet is not None:
            list_definition = self.lists.get(style.bullet.list_id)
            if list_definition is None:
                raise MalformedInputError(
                    f"Paragraph bullet references unknown list '{style.bullet.list_id}'"
                )
            # Ordered items all use "1."; no per-list counter is kept
            if list_definition.is_ordered:
                return ORDERED_LIST_PREFIX
            return UNORDERED_LIST_PREFIX

        return ''

    def _render_section_break(self, section_break: SectionBreak) -> str:
        return HORIZONTAL_RULE

    def _render_table(self, table: Table) -> str:
        lines = ['\n']
        for row_index, row in enumerate(table.rows):
            cells = [self._render_cell(cell) for cell in row.cells]
            lines.append('| ' + ' | '.join(cells) + ' |\n')

            if row_index == 0:
                lines.append('|' + ' --- |' * len(row.cells) + '\n')

        lines.append('\n')
        self.logger.debug(f"Rendered table with {len(table.rows)} row(s)")
        return ''.join(lines)

    def _render_cell(self, cell: TableCell) -> str:
        parts = []
        for block in cell.blocks:
            if block.kind is not BlockKind.PARAGRAPH:
                self.logger.debug(f"Skipping {block.kind.value} inside table cell")
                continue
            single_line_runs = [
                TextRun(content=run.content.replace('\n', ''), style=run.style)
                for run in block.runs
            ]
            text = self.render_runs(single_line_runs)
            if text:
                parts.append(text)
        return ' '.join(parts)


__all__ = ['BlockRenderer', 'MalformedInputError']
