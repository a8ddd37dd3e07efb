import unittest
import sys
from pathlib import Path

from bs4 import BeautifulSoup

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mdcraft.core.inline import format_inline


def soup_of(text):
    return BeautifulSoup(format_inline(text), 'html.parser')


class TestInlineFormatter(unittest.TestCase):
    def test_plain_text_is_not_wrapped(self):
        self.assertEqual(format_inline("plain text"), "plain text")

    def test_bold_italic_combined(self):
        """***x*** is consumed once, as emphasis inside strong."""
        soup = soup_of("***bold italic***")
        strongs = soup.find_all('strong')
        ems = soup.find_all('em')
        self.assertEqual(len(strongs), 1)
        self.assertEqual(len(ems), 1)
        self.assertIs(ems[0].parent, strongs[0])
        self.assertEqual(ems[0].get_text(), "bold italic")
        self.assertNotIn('*', soup.get_text())

    def test_bold_and_italic(self):
        soup = soup_of("a **strong** and *soft* word")
        self.assertEqual(soup.find('strong').get_text(), "strong")
        self.assertEqual(soup.find('em').get_text(), "soft")

    def test_strikethrough(self):
        soup = soup_of("~~gone~~ but not ~forgotten~")
        self.assertEqual(soup.find('del').get_text(), "gone")
        self.assertIsNone(soup.find('sub'))

    def test_code_span_content_is_literal(self):
        soup = soup_of("use `a *b* c` here")
        self.assertEqual(soup.find('code').get_text(), "a *b* c")
        self.assertIsNone(soup.find('em'))

    def test_image_wins_over_link(self):
        soup = soup_of("![logo](img/logo.png)")
        img = soup.find('img')
        self.assertIsNotNone(img)
        self.assertEqual(img['src'], "img/logo.png")
        self.assertEqual(img['alt'], "logo")
        self.assertIsNone(soup.find('a'))

    def test_link_opens_in_new_tab(self):
        soup = soup_of("see [the docs](https://example.com/docs)")
        link = soup.find('a')
        self.assertEqual(link['href'], "https://example.com/docs")
        self.assertEqual(link['target'], "_blank")
        self.assertIn('noopener', link['rel'])
        self.assertEqual(link.get_text(), "the docs")

    def test_malformed_syntax_passes_through(self):
        self.assertEqual(format_inline("**unclosed"), "**unclosed")
        self.assertEqual(format_inline("[no url]"), "[no url]")

    def test_block_syntax_stays_literal(self):
        """Only inline spans are converted."""
        self.assertEqual(format_inline("# not a heading"), "# not a heading")
        self.assertEqual(format_inline("- not a list"), "- not a list")

    def test_html_special_chars_are_escaped(self):
        soup = soup_of("1 < 2 & 3")
        self.assertEqual(soup.get_text(), "1 < 2 & 3")

    def test_blank_line_runs_are_kept_apart(self):
        self.assertEqual(format_inline("first\n\nsecond"), "first\n\nsecond")

    def test_empty_input(self):
        self.assertEqual(format_inline(""), "")


if __name__ == '__main__':
    unittest.main()
