"""Data models for the Google Docs to Markdown export pipeline."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

logger = logging.getLogger('gdocs_markdown_exporter')


HEADING_PREFIX = 'HEADING_'
HEADING_LEVELS = {
    'HEADING_1': 1,
    'HEADING_2': 2,
    'HEADING_3': 3,
    'HEADING_4': 4,
    'HEADING_5': 5,
    'HEADING_6': 6,
}
ORDERED_GLYPH_TYPE = 'DECIMAL'


class BlockKind(Enum):
    """Tags for the structural block variants of a document body."""
    PARAGRAPH = "paragraph"
    TABLE = "table"
    SECTION_BREAK = "section_break"


@dataclass(frozen=True)
class Link:
    """Hyperlink target of a text run."""

    url: str = ''


@dataclass(frozen=True)
class TextStyle:
    """Inline style flags of a text run. All flags are independent."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    link: Optional[Link] = None


@dataclass(frozen=True)
class TextRun:
    """A contiguous span of text sharing one style."""

    content: str
    style: Optional[TextStyle] = None


@dataclass(frozen=True)
class Bullet:
    """List membership of a paragraph."""

    list_id: str


@dataclass(frozen=True)
class ParagraphStyle:
    """Named style and list membership of a paragraph."""

    named_style: Optional[str] = None
    bullet: Optional[Bullet] = None

    @property
    def is_heading(self) -> bool:
        return bool(self.named_style) and self.named_style.startswith(HEADING_PREFIX)

    @property
    def heading_level(self) -> Optional[int]:
        """
        Markdown heading level for this style.

        Returns:
            1-6 for HEADING_1..HEADING_6, 1 for any other HEADING_* value,
            None when the paragraph is not a heading
        """
        if not self.is_heading:
            return None
        return HEADING_LEVELS.get(self.named_style, 1)


@dataclass(frozen=True)
class ListDefinition:
    """Numbering scheme of a list, taken from its first nesting level."""

    glyph_type: Optional[str] = None

    @property
    def is_ordered(self) -> bool:
        return self.glyph_type == ORDERED_GLYPH_TYPE


@dataclass(frozen=True)
class Paragraph:
    """Paragraph block: styled runs with optional heading/list context."""

    kind: ClassVar[BlockKind] = BlockKind.PARAGRAPH

    runs: List[TextRun] = field(default_factory=list)
    style: Optional[ParagraphStyle] = None


@dataclass(frozen=True)
class TableCell:
    """Table cell holding paragraph blocks rendered on a single line."""

    blocks: List['Block'] = field(default_factory=list)


@dataclass(frozen=True)
class TableRow:
    cells: List[TableCell] = field(default_factory=list)


@dataclass(frozen=True)
class Table:
    """Table block; the first row is rendered as the header row."""

    kind: ClassVar[BlockKind] = BlockKind.TABLE

    rows: List[TableRow] = field(default_factory=list)


@dataclass(frozen=True)
class SectionBreak:
    kind: ClassVar[BlockKind] = BlockKind.SECTION_BREAK


Block = Union[Paragraph, Table, SectionBreak]


@dataclass(frozen=True)
class InlineImage:
    """Embedded image referenced by the document."""

    source_uri: str


@dataclass(frozen=True)
class Document:
    """
    Structured document as returned by the Docs API.

    Owned by the fetch layer and read-only during conversion. The order of
    `blocks` is significant; `inline_images` is iterated in insertion order.
    """

    title: str
    blocks: List[Block] = field(default_factory=list)
    inline_images: Dict[str, InlineImage] = field(default_factory=dict)
    lists: Dict[str, ListDefinition] = field(default_factory=dict)
    document_id: Optional[str] = None


@dataclass
class DriveFile:
    """A Google Doc listed in a Drive folder."""

    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}


@dataclass
class DocumentComment:
    """A comment thread's top-level comment."""

    content: str
    author_name: str = ''
    author_email: str = ''
    created_time: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Serialize comment to dictionary."""
        return {
            'content': self.content,
            'author_name': self.author_name,
            'author_email': self.author_email,
            'created_time': self.created_time
        }


@dataclass
class DocumentRevision:
    """Metadata of a historical revision of a document."""

    id: str
    modified_time: str = ''
    modifier_name: str = ''
    modifier_email: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Serialize revision to dictionary."""
        return {
            'id': self.id,
            'modified_time': self.modified_time,
            'modifier_name': self.modifier_name,
            'modifier_email': self.modifier_email
        }


__all__ = [
    'BlockKind',
    'Block',
    'Bullet',
    'Document',
    'DocumentComment',
    'DocumentRevision',
    'DriveFile',
    'InlineImage',
    'Link',
    'ListDefinition',
    'Paragraph',
    'ParagraphStyle',
    'SectionBreak',
    'Table',
    'TableCell',
    'TableRow',
    'TextRun',
    'TextStyle',
]
