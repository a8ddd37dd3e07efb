import unittest
import sys
from pathlib import Path

from bs4 import BeautifulSoup

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mdcraft.core.renderer import classify_line, render_markdown
from mdcraft.generators.toc import extract_headings


def render(text):
    return BeautifulSoup(render_markdown(text), 'html.parser')


class TestBlockRenderer(unittest.TestCase):
    def test_heading_levels_with_anchor_ids(self):
        soup = render("# Title\n\n###### Deep Dive")
        self.assertEqual(soup.find('h1').get_text(), "Title")
        self.assertEqual(soup.find('h1')['id'], "title")
        self.assertEqual(soup.find('h6')['id'], "deep-dive")

    def test_heading_id_matches_toc_slug(self):
        soup = render("## Sub Heading!\n\n## The `x` var")
        ids = [h['id'] for h in soup.find_all('h2')]
        self.assertEqual(ids, ["sub-heading", "the-x-var"])

    def test_heading_ids_match_toc_for_links_and_images(self):
        doc = "## See [docs](https://x.io)\n\n## Use ![logo](a.png) here\n\n### Closed ###"
        soup = render(doc)
        ids = [h['id'] for h in soup.find_all(['h2', 'h3'])]
        self.assertEqual(ids, [h.id for h in extract_headings(doc)])
        self.assertEqual(ids[0], "see-docs-https-x-io")
        self.assertEqual(soup.find('h2').find('a')['href'], "https://x.io")

    def test_heading_requires_space(self):
        soup = render("#hashtag")
        self.assertIsNone(soup.find('h1'))
        self.assertIn("#hashtag", soup.get_text())

    def test_fenced_code_is_verbatim(self):
        soup = render("```python\nx = '<b>' + **not_bold**\n```")
        block = soup.find('div', class_='code-block')
        self.assertIsNotNone(block)
        self.assertEqual(block.find('div', class_='code-lang').get_text(), "python")
        code = block.find('code')
        self.assertEqual(code['class'], ["language-python"])
        self.assertEqual(code.get_text(), "x = '<b>' + **not_bold**")
        self.assertIsNone(soup.find('strong'))
        self.assertIsNone(soup.find('b'))

    def test_fenced_code_without_language(self):
        soup = render("text\n\n```\nplain\n```\n\nmore")
        block = soup.find('div', class_='code-block')
        self.assertIsNone(block.find('div', class_='code-lang'))
        self.assertEqual(block.find('code').get_text(), "plain")
        self.assertEqual(len(soup.find_all('p')), 2)

    def test_unclosed_fence_degrades(self):
        soup = render("```python\nprint('hi')")
        self.assertIsNone(soup.find('div', class_='code-block'))
        self.assertIn("print('hi')", soup.get_text())

    def test_table(self):
        soup = render("| A | B |\n| --- | --- |\n| 1 | **2** |")
        table = soup.find('table')
        self.assertEqual([th.get_text() for th in table.find_all('th')], ["A", "B"])
        cells = table.find('tbody').find_all('td')
        self.assertEqual(cells[0].get_text(), "1")
        self.assertEqual(cells[1].find('strong').get_text(), "2")

    def test_table_without_separator_is_text(self):
        soup = render("| A | B |\n| 1 | 2 |")
        self.assertIsNone(soup.find('table'))
        self.assertIn("| A | B |", soup.get_text())

    def test_table_directly_after_paragraph(self):
        soup = render("Results:\n| A | B |\n| --- | --- |\n| 1 | 2 |")
        self.assertEqual(soup.find('p').get_text(), "Results:")
        self.assertIsNotNone(soup.find('table'))

    def test_horizontal_rules(self):
        soup = render("above\n\n---\n\nbetween\n\n***\n\nbelow")
        self.assertEqual(len(soup.find_all('hr')), 2)

    def test_dashes_under_text_are_a_rule(self):
        soup = render("Text\n---")
        self.assertIsNone(soup.find('h2'))
        self.assertIsNotNone(soup.find('hr'))
        self.assertEqual(soup.find('p').get_text(), "Text")

    def test_blockquote(self):
        soup = render("> quoted *words*")
        quote = soup.find('blockquote')
        self.assertEqual(quote.get_text().strip(), "quoted words")
        self.assertEqual(quote.find('em').get_text(), "words")

    def test_unordered_markers_merge_into_one_list(self):
        soup = render("- one\n- two\n* three\n+ four")
        lists = soup.find_all('ul')
        self.assertEqual(len(lists), 1)
        self.assertEqual([li.get_text() for li in lists[0].find_all('li')], ["one", "two", "three", "four"])

    def test_ordered_list(self):
        soup = render("1. first\n2. second")
        items = soup.find('ol').find_all('li')
        self.assertEqual([li.get_text() for li in items], ["first", "second"])

    def test_list_directly_after_paragraph(self):
        soup = render("Shopping:\n- eggs\n- milk")
        self.assertEqual(soup.find('p').get_text(), "Shopping:")
        self.assertEqual(len(soup.find('ul').find_all('li')), 2)

    def test_different_list_kinds_stay_separate(self):
        soup = render("- bullet\n1. number")
        self.assertEqual(len(soup.find_all('ul')), 1)
        self.assertEqual(len(soup.find_all('ol')), 1)

    def test_soft_line_break(self):
        soup = render("line one\nline two")
        paragraph = soup.find('p')
        self.assertIsNotNone(paragraph.find('br'))
        self.assertEqual(len(soup.find_all('p')), 1)

    def test_paragraphs_split_on_blank_lines(self):
        soup = render("first\n\nsecond\n\n\nthird")
        self.assertEqual([p.get_text() for p in soup.find_all('p')], ["first", "second", "third"])

    def test_indented_text_is_not_code(self):
        soup = render("    indented line")
        self.assertIsNone(soup.find('pre'))
        self.assertEqual(soup.find('p').get_text(), "indented line")

    def test_image_and_link_in_paragraph(self):
        soup = render("![alt](a.png) and [link](http://x.org)")
        self.assertEqual(soup.find('img')['src'], "a.png")
        self.assertEqual(soup.find('a')['target'], "_blank")

    def test_empty_input(self):
        self.assertEqual(render_markdown(""), "")


class TestClassifyLine(unittest.TestCase):
    def test_kinds(self):
        self.assertIsNone(classify_line("   ", None))
        self.assertEqual(classify_line("---", None), 'hr')
        self.assertEqual(classify_line("* * *", None), 'hr')
        self.assertEqual(classify_line("- item", None), 'ulist')
        self.assertEqual(classify_line("12. item", None), 'olist')
        self.assertEqual(classify_line("> quote", None), 'quote')
        self.assertEqual(classify_line("| a |", None), 'table')
        self.assertEqual(classify_line("## h", None), 'heading')
        self.assertEqual(classify_line("**bold** start", None), 'text')

    def test_indented_line_continues_list(self):
        self.assertEqual(classify_line("    continued", 'ulist'), 'ulist')
        self.assertEqual(classify_line("  1. nested", 'ulist'), 'ulist')
        self.assertEqual(classify_line("    text", 'text'), 'text')


if __name__ == '__main__':
    unittest.main()
