import unittest
import sys
from pathlib import Path

from bs4 import BeautifulSoup

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mdcraft.core.diagrams import (
    ClientSideDiagramRenderer, DiagramRenderError, DiagramRenderer, Segment, SegmentKind,
    detect_diagram_type, join_segments, render_diagram, split_diagram_blocks,
)

SAMPLE = """# Doc

Intro text.

```mermaid
graph TD
    A --> B
```

Between the diagrams.
```mermaid

sequenceDiagram
    A->>B: hi

```
Tail with ```python fences``` left alone.
"""


class TestSplitter(unittest.TestCase):
    def test_no_fences_gives_single_segment(self):
        for text in ["", "plain", "```python\nx = 1\n```\n", "```mermaid without newline```"]:
            segments = split_diagram_blocks(text)
            self.assertEqual(segments, [Segment(SegmentKind.MARKDOWN, text)])

    def test_segments_alternate(self):
        segments = split_diagram_blocks(SAMPLE)
        kinds = [s.kind for s in segments]
        self.assertEqual(kinds, [
            SegmentKind.MARKDOWN, SegmentKind.DIAGRAM,
            SegmentKind.MARKDOWN, SegmentKind.DIAGRAM,
            SegmentKind.MARKDOWN,
        ])
        self.assertEqual(segments[1].source, "graph TD\n    A --> B")
        self.assertTrue(segments[4].source.startswith("\nTail with"))

    def test_round_trip(self):
        for text in [SAMPLE, "```mermaid\npie\n```", "a```mermaid\nx\n``````mermaid\ny\n```b"]:
            self.assertEqual(join_segments(split_diagram_blocks(text)), text)

    def test_adjacent_fences_have_empty_markdown_between(self):
        segments = split_diagram_blocks("```mermaid\nx\n``````mermaid\ny\n```")
        self.assertEqual(len(segments), 5)
        self.assertEqual([s.source for s in segments if not s.is_diagram], ["", "", ""])

    def test_diagram_content_trims_blank_lines(self):
        segments = split_diagram_blocks(SAMPLE)
        self.assertEqual(segments[3].source, "\nsequenceDiagram\n    A->>B: hi\n")
        self.assertEqual(segments[3].content, "sequenceDiagram\n    A->>B: hi")
        # Markdown segments are handed over untouched
        self.assertEqual(segments[0].content, segments[0].source)


class FailingRenderer(DiagramRenderer):
    def render(self, source):
        raise RuntimeError("renderer crashed")


class TestDiagramRendering(unittest.TestCase):
    def test_client_side_renderer(self):
        html = render_diagram("graph TD\n    A[<b>] --> B", ClientSideDiagramRenderer(), index=2)
        soup = BeautifulSoup(html, 'html.parser')
        block = soup.find('div', class_='diagram-block')
        self.assertEqual(block['id'], "diagram-2")
        pre = block.find('pre', class_='mermaid')
        self.assertEqual(pre.get_text(), "graph TD\n    A[<b>] --> B")
        self.assertIsNone(pre.find('b'))

    def test_default_renderer_is_client_side(self):
        self.assertIn('class="mermaid"', render_diagram("pie\n    \"a\" : 1"))

    def test_invalid_source_shows_error_panel(self):
        with self.assertLogs('mdcraft.core.diagrams', level='WARNING'):
            html = render_diagram("notADiagram\n  A --> B")
        soup = BeautifulSoup(html, 'html.parser')
        panel = soup.find('div', class_='diagram-error')
        self.assertEqual(panel.find('p', class_='diagram-error-title').get_text(), "Invalid Mermaid syntax:")
        self.assertEqual(panel.find('pre').get_text(), "notADiagram\n  A --> B")
        self.assertIn("notADiagram", panel.find('p', class_='diagram-error-message').get_text())

    def test_renderer_failure_is_contained(self):
        with self.assertLogs('mdcraft.core.diagrams', level='ERROR'):
            html = render_diagram("graph TD", FailingRenderer())
        soup = BeautifulSoup(html, 'html.parser')
        self.assertEqual(soup.find('p', class_='diagram-error-title').get_text(), "Mermaid rendering error:")
        self.assertEqual(soup.find('p', class_='diagram-error-message').get_text(), "Error: renderer crashed")
        self.assertEqual(soup.find('pre').get_text(), "graph TD")

    def test_empty_source(self):
        html = render_diagram("  \n ")
        self.assertIn("No Mermaid chart content provided", html)

    def test_render_error_is_exception(self):
        with self.assertRaises(DiagramRenderError):
            ClientSideDiagramRenderer().render("%% only a comment")


class TestDetectDiagramType(unittest.TestCase):
    def test_plain(self):
        self.assertEqual(detect_diagram_type("flowchart LR\n A-->B"), "flowchart")
        self.assertEqual(detect_diagram_type("pie title Pets"), "pie")

    def test_skips_directives_and_comments(self):
        source = "%%{init: {'theme':'dark'}}%%\n%% comment\n\nsequenceDiagram"
        self.assertEqual(detect_diagram_type(source), "sequenceDiagram")

    def test_skips_front_matter(self):
        source = "---\ntitle: Flow\n---\ngraph TD"
        self.assertEqual(detect_diagram_type(source), "graph")

    def test_nothing_found(self):
        self.assertIsNone(detect_diagram_type(""))


if __name__ == '__main__':
    unittest.main()
