"""Inline style rendering for a single text run."""

import logging
from typing import List, Optional

from models import TextStyle

logger = logging.getLogger('gdocs_markdown_exporter.converters.style_renderer')


BOLD_MARKER = '**'
ITALIC_MARKER = '_'
UNDERLINE_OPEN = '<ins>'
UNDERLINE_CLOSE = '</ins>'
STRIKETHROUGH_MARKER = '~~'


class StyleRenderer:
    """
    Wrap the text of one run in Markdown inline markers.

    The link is applied first so every other marker wraps the whole
    ``[text](url)`` fragment. Openers are emitted in the fixed order bold,
    italic, underline, strikethrough; closers in reverse order.
    """

    def render(self, content: str, style: Optional[TextStyle]) -> str:
        """
        Render a run of text with its style.

        Args:
            content: Raw run text (may be empty or whitespace-only)
            style: Style descriptor, or None for unstyled text

        Returns:
            Markdown fragment with balanced markers
        """
        if style is None:
            return content

        text = content
        if style.link is not None and style.link.url:
            text = f"[{text}]({style.link.url})"

        markers = self._active_markers(style)

        opening = ''.join(markers)
        closing = ''.join(self._closing_marker(marker) for marker in reversed(markers))

        return f"{opening}{text}{closing}"

    @staticmethod
    def _active_markers(style: TextStyle) -> List[str]:
        markers = []
        if style.bold:
            markers.append(BOLD_MARKER)
        if style.italic:
            markers.append(ITALIC_MARKER)
        if style.underline:
            markers.append(UNDERLINE_OPEN)
        if style.strikethrough:
            markers.append(STRIKETHROUGH_MARKER)
        return markers

    @staticmethod
    def _closing_marker(marker: str) -> str:
        if marker == UNDERLINE_OPEN:
            return UNDERLINE_CLOSE
        return marker.strip()


__all__ = ['StyleRenderer']
