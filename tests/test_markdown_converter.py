"""Tests for whole-document conversion to Markdown."""

import unittest
from unittest.mock import Mock, call

from converters import DocumentConverter, MalformedInputError, consolidate, convert_document
from models import (
    Bullet,
    Document,
    InlineImage,
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


def text_paragraph(text, **style):
    return Paragraph(
        runs=[TextRun(content=text)],
        style=ParagraphStyle(**style) if style else None
    )


class TestDocumentConverter(unittest.TestCase):
    def test_empty_document_is_only_the_title(self):
        markdown, title = DocumentConverter().convert(Document(title="Report"))
        self.assertEqual(markdown, "# Report\n\n")
        self.assertEqual(title, "Report")

    def test_convert_document_helper(self):
        self.assertEqual(convert_document(Document(title="Report")), ("# Report\n\n", "Report"))

    def test_blocks_are_rendered_in_order(self):
        document = Document(
            title="Plan",
            blocks=[
                text_paragraph("Overview", named_style="HEADING_1"),
                text_paragraph("Intro text"),
                Table(rows=[TableRow(cells=[TableCell(blocks=[text_paragraph("Cell")])])]),
                SectionBreak(),
                text_paragraph("Step", bullet=Bullet(list_id="steps")),
                text_paragraph("Closing"),
            ],
            lists={"steps": ListDefinition(glyph_type="DECIMAL")}
        )

        markdown, _ = DocumentConverter().convert(document)

        fragments = ["# Plan", "# Overview", "Intro text", "| Cell |", "\n---\n", "1. Step", "Closing"]
        positions = [markdown.index(fragment) for fragment in fragments]
        self.assertEqual(positions, sorted(positions))
        self.assertEqual(
            markdown,
            "# Plan\n\n# Overview\n\nIntro text\n\n\n| Cell |\n| --- |\n\n\n---\n1. Step\n\nClosing\n\n"
        )

    def test_split_bold_run_is_consolidated(self):
        document = Document(
            title="Doc",
            blocks=[Paragraph(runs=[TextRun(content="Hello\n", style=TextStyle(bold=True))])]
        )
        markdown, _ = DocumentConverter().convert(document)
        self.assertEqual(markdown, "# Doc\n\n**Hello**\n\n")

    def test_output_is_already_consolidated(self):
        document = Document(
            title="Doc",
            blocks=[
                Paragraph(runs=[
                    TextRun(content="Intro "),
                    TextRun(content="mixed\nstyle ", style=TextStyle(italic=True)),
                    TextRun(content="end\n"),
                ]),
                text_paragraph("- tail"),
            ]
        )
        markdown, _ = DocumentConverter().convert(document)
        self.assertEqual(consolidate(markdown), markdown)

    def test_images_are_numbered_and_appended_after_body(self):
        image_store = Mock()
        document = Document(
            title="Pics",
            blocks=[text_paragraph("Body")],
            inline_images={
                "kix.first": InlineImage(source_uri="https://img/1"),
                "kix.second": InlineImage(source_uri="https://img/2"),
            }
        )

        markdown, _ = DocumentConverter(image_store=image_store).convert(document)

        self.assertEqual(
            markdown,
            "# Pics\n\nBody\n\n![Image](image1.jpg)\n\n![Image](image2.jpg)\n\n"
        )
        self.assertEqual(
            image_store.persist.call_args_list,
            [call("https://img/1", "image1.jpg"), call("https://img/2", "image2.jpg")]
        )

    def test_image_numbering_restarts_for_each_document(self):
        image_store = Mock()
        converter = DocumentConverter(image_store=image_store)
        document = Document(title="A", inline_images={"i": InlineImage(source_uri="u")})

        converter.convert(document)
        markdown, _ = converter.convert(document)

        self.assertIn("![Image](image1.jpg)", markdown)
        self.assertNotIn("image2.jpg", markdown)
        self.assertEqual(converter.get_stats()['documents_converted'], 2)

    def test_images_referenced_without_store(self):
        document = Document(title="A", inline_images={"i": InlineImage(source_uri="u")})
        markdown, _ = DocumentConverter().convert(document)
        self.assertTrue(markdown.endswith("![Image](image1.jpg)\n\n"))

    def test_image_failure_aborts_conversion(self):
        image_store = Mock()
        image_store.persist.side_effect = OSError("disk full")
        document = Document(title="A", inline_images={"i": InlineImage(source_uri="u")})

        with self.assertRaises(OSError):
            DocumentConverter(image_store=image_store).convert(document)

    def test_malformed_list_reference_propagates(self):
        document = Document(title="A", blocks=[text_paragraph("x", bullet=Bullet(list_id="nope"))])
        with self.assertRaises(MalformedInputError):
            DocumentConverter().convert(document)

    def test_stats(self):
        converter = DocumentConverter()
        converter.convert(Document(title="A", blocks=[text_paragraph("x"), SectionBreak()]))
        stats = converter.get_stats()
        self.assertEqual(stats['blocks_rendered'], 2)
        self.assertEqual(stats['images_referenced'], 0)


if __name__ == '__main__':
    unittest.main()
