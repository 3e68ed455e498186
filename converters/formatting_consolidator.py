"""
Post-processing pass that repairs inline formatting split across line breaks.

Rendered runs can leave a line break inside a styled span (``**Hello\\n**``)
or between two halves of one span (``**Line1\\nLine2**``). Markdown does not
allow emphasis to cross a line break cleanly, so the consolidator rewrites:

- Group A: spans holding line breaks, blank lines included, are joined onto
  one line and followed by a blank-line separator.
- Group B: spaces, then newlines, immediately before a closing marker are
  removed.

Markers of one kind are paired left to right over the whole text. Each rule
is a single ``re.sub`` pass. The ordered rule sequence is repeated until a
round leaves the text unchanged, so consolidating twice gives the same
result as consolidating once.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Pattern, Tuple

logger = logging.getLogger('gdocs_markdown_exporter.converters.formatting_consolidator')


@dataclass(frozen=True)
class MarkerPair:
    """Opening and closing syntax of one inline format."""

    name: str
    opener: str
    closer: str

    def span_pattern(self) -> Pattern:
        """Regex matching one opener, the text up to the next marker character, and the closer."""
        excluded = re.escape(self.opener[0])
        return re.compile(
            re.escape(self.opener) + '([^' + excluded + ']*)' + re.escape(self.closer)
        )


MARKERS = (
    MarkerPair('bold', '**', '**'),
    MarkerPair('italic', '_', '_'),
    MarkerPair('strikethrough', '~~', '~~'),
    MarkerPair('underline', '<ins>', '</ins>'),
)

LINE_BREAK = re.compile(r'\r?\n')
TRAILING_WHITESPACE = ' \t\r\n'
BLANK_LINE = '\n\n'

SpanRewrite = Callable[[MarkerPair, str], Optional[str]]


class FormattingConsolidator:
    """Apply the ordered merge and cleanup rules to a Markdown string."""

    def __init__(self, markers: Tuple[MarkerPair, ...] = MARKERS, logger: Optional[logging.Logger] = None):
        self.markers = markers
        self.logger = logger or logging.getLogger('gdocs_markdown_exporter.converters.formatting_consolidator')
        self._patterns: Dict[str, Pattern] = {marker.name: marker.span_pattern() for marker in markers}

    def consolidate(self, text: str) -> str:
        """
        Repair formatting markers split across line breaks.

        Args:
            text: Markdown text (a converted document or any other Markdown)

        Returns:
            Consolidated Markdown text
        """
        total = 0
        rounds = 0

        # Every rewrite deletes characters or moves line breaks past a
        # closer, so the rounds stop after finitely many steps.
        while True:
            text, rewrites = self._run_rules(text)
            if not rewrites:
                break
            total += rewrites
            rounds += 1

        if total:
            self.logger.debug(f"Consolidated {total} formatting span(s) in {rounds} round(s)")
        return text

    def _run_rules(self, text: str) -> Tuple[str, int]:
        """Apply every rule once, in order: merges, space cleanup, newline cleanup."""
        rewrites = 0
        rules = (self._merge_line_breaks, self._strip_spaces_before_closer, self._strip_newline_before_closer)
        for rule in rules:
            for marker in self.markers:
                text, count = self._apply(text, marker, rule)
                rewrites += count
        return text, rewrites

    def _apply(self, text: str, marker: MarkerPair, rewrite: SpanRewrite) -> Tuple[str, int]:
        """Run one rule over the whole text in a single pass."""
        pattern = self._patterns[marker.name]
        changed = 0

        def replace(match):
            nonlocal changed
            rewritten = rewrite(marker, match.group(1))
            if rewritten is None:
                return match.group(0)
            changed += 1
            return rewritten

        return pattern.sub(replace, text), changed

    @staticmethod
    def _merge_line_breaks(marker: MarkerPair, inner: str) -> Optional[str]:
        core, trailing = _split_trailing_whitespace(inner)
        if '\n' not in core:
            return None
        merged = LINE_BREAK.sub('', core)
        return f"{marker.opener}{merged}{trailing}{marker.closer}{BLANK_LINE}"

    @staticmethod
    def _strip_spaces_before_closer(marker: MarkerPair, inner: str) -> Optional[str]:
        stripped = inner.rstrip(' \t')
        if stripped == inner:
            return None
        return f"{marker.opener}{stripped}{marker.closer}"

    @staticmethod
    def _strip_newline_before_closer(marker: MarkerPair, inner: str) -> Optional[str]:
        core, trailing = _split_trailing_whitespace(inner)
        if '\n' not in trailing:
            return None
        return f"{marker.opener}{core}{marker.closer}"


def _split_trailing_whitespace(inner: str) -> Tuple[str, str]:
    core = inner.rstrip(TRAILING_WHITESPACE)
    return core, inner[len(core):]


_default_consolidator = FormattingConsolidator()


def consolidate(text: str) -> str:
    """Consolidate Markdown formatting with the default marker set."""
    return _default_consolidator.consolidate(text)


__all__ = ['FormattingConsolidator', 'MarkerPair', 'MARKERS', 'consolidate']
