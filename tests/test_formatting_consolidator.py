"""Tests for repairing inline formatting split across line breaks."""

import random
import unittest

from converters.formatting_consolidator import FormattingConsolidator, MarkerPair, consolidate


class TestMergeAcrossLineBreaks(unittest.TestCase):
    def test_bold_split_by_newline_is_joined(self):
        self.assertEqual(consolidate("**Line1isbold\nmore**"), "**Line1isboldmore**\n\n")

    def test_italic_split_by_newline_is_joined(self):
        self.assertEqual(consolidate("_first\nsecond_"), "_firstsecond_\n\n")

    def test_strikethrough_split_by_newline_is_joined(self):
        self.assertEqual(consolidate("~~old\ntext~~"), "~~oldtext~~\n\n")

    def test_underline_split_by_newline_is_joined(self):
        self.assertEqual(consolidate("<ins>under\nlined</ins>"), "<ins>underlined</ins>\n\n")

    def test_crlf_is_removed(self):
        self.assertEqual(consolidate("**a\r\nb**"), "**ab**\n\n")

    def test_span_across_blank_line_is_joined(self):
        self.assertEqual(consolidate("**Hello\n\nWorld**"), "**HelloWorld**\n\n")
        self.assertEqual(consolidate("Intro _a\n\n\nb_ end"), "Intro _ab_\n\n end")

    def test_surrounding_text_is_preserved(self):
        self.assertEqual(
            consolidate("Intro **bold\npart** tail\n\n"),
            "Intro **boldpart**\n\n tail\n\n"
        )


class TestCleanupBeforeClosers(unittest.TestCase):
    def test_trailing_space_before_closer_is_removed(self):
        self.assertEqual(consolidate("**bold **"), "**bold**")
        self.assertEqual(consolidate("_it _"), "_it_")
        self.assertEqual(consolidate("~~gone ~~"), "~~gone~~")
        self.assertEqual(consolidate("<ins>u </ins>"), "<ins>u</ins>")

    def test_trailing_newline_before_closer_is_removed(self):
        self.assertEqual(consolidate("**Hello\n**\n\n"), "**Hello**\n\n")
        self.assertEqual(consolidate("_Hello\n_\n\n"), "_Hello_\n\n")

    def test_space_and_newline_before_closer(self):
        self.assertEqual(consolidate("**word \n**"), "**word**")

    def test_every_trailing_space_and_tab_is_removed(self):
        self.assertEqual(consolidate("**a  **"), "**a**")
        self.assertEqual(consolidate("_b \t_"), "_b_")
        self.assertEqual(consolidate("~~c\t \t~~"), "~~c~~")

    def test_well_formed_markdown_is_untouched(self):
        text = "# Title\n\nSome **bold**, _italic_ and ~~struck~~ <ins>text</ins>.\n\n- item\n\n"
        self.assertEqual(consolidate(text), text)


class TestConsolidationProperties(unittest.TestCase):
    SAMPLES = [
        "",
        "# Report\n\n",
        "**Line1isbold\nmore**",
        "**Hello\n**\n\nNext paragraph with _it \n_\n\n",
        "Intro **bold\npart** and ~~a\nb ~~ then <ins>x\ny </ins>\n\n",
        "**_nested\nstyle_**\n\n",
        "\n| A | B |\n| --- | --- |\n| **C ** | D |\n\n",
        "- **item\n**\n\n1. _one_\n\n\n---\n",
        "![Image](image1.jpg)\n\n",
    ]

    def test_consolidation_is_idempotent(self):
        for sample in self.SAMPLES:
            with self.subTest(sample=sample):
                once = consolidate(sample)
                self.assertEqual(consolidate(once), once)

    def test_adjacent_markers_settle_in_one_call(self):
        text = "***\n***\t**\n\t"
        once = consolidate(text)
        self.assertEqual(once, "********\n\t")
        self.assertEqual(consolidate(once), once)

    def test_idempotent_on_random_marker_soup(self):
        tokens = ['**', '*', '_', '~~', '~', '<ins>', '</ins>', ' ', '\t', '\n', '\r\n', 'a', 'b']
        rng = random.Random(20241019)
        for _ in range(500):
            text = ''.join(rng.choice(tokens) for _ in range(rng.randint(0, 24)))
            with self.subTest(text=text):
                once = consolidate(text)
                self.assertEqual(consolidate(once), once)

    def test_markers_are_not_added_or_removed(self):
        for sample in self.SAMPLES:
            with self.subTest(sample=sample):
                result = consolidate(sample)
                for marker in ('**', '~~', '<ins>', '</ins>'):
                    self.assertEqual(result.count(marker), sample.count(marker))

    def test_span_containing_a_marker_character_is_left_alone(self):
        """A literal marker character inside a span blocks the match."""
        self.assertEqual(consolidate("**a*b\nc**"), "**a*b\nc**")

    def test_custom_marker_set(self):
        consolidator = FormattingConsolidator(markers=(MarkerPair('code', '`', '`'),))
        self.assertEqual(consolidator.consolidate("`a\nb`"), "`ab`\n\n")
        self.assertEqual(consolidator.consolidate("**a\nb**"), "**a\nb**")


if __name__ == '__main__':
    unittest.main()
