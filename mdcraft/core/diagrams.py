"""
Diagram-block splitting and the diagram rendering policy.

The preview treats ```mermaid fences as diagram source handed to an external
renderer; everything between them is ordinary markdown. The renderer itself
is a collaborator: the only thing decided here is what the preview shows when
it fails.
"""
import html
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

DIAGRAM_LANG = 'mermaid'
DIAGRAM_OPEN = f'```{DIAGRAM_LANG}\n'
DIAGRAM_CLOSE = '\n```'
DIAGRAM_FENCE_RE = re.compile(r'```mermaid\n(.*?)\n```', re.DOTALL)

# First keyword of every diagram type mermaid understands
KNOWN_DIAGRAM_TYPES = frozenset([
    'graph', 'flowchart', 'flowchart-elk', 'sequenceDiagram', 'classDiagram',
    'classDiagram-v2', 'stateDiagram', 'stateDiagram-v2', 'erDiagram',
    'journey', 'gantt', 'pie', 'quadrantChart', 'requirementDiagram',
    'gitGraph', 'C4Context', 'C4Container', 'C4Component', 'C4Dynamic',
    'C4Deployment', 'mindmap', 'timeline', 'zenuml', 'sankey-beta',
    'xychart-beta', 'block-beta', 'packet-beta', 'architecture-beta',
])


class SegmentKind(Enum):
    MARKDOWN = 'markdown'
    DIAGRAM = 'diagram'


@dataclass(frozen=True)
class Segment:
    """A run of the buffer: plain markdown, or the source between diagram fences."""
    kind: SegmentKind
    source: str

    @property
    def is_diagram(self) -> bool:
        return self.kind == SegmentKind.DIAGRAM

    @property
    def content(self) -> str:
        """Diagram source without leading/trailing blank lines; markdown unchanged."""
        if not self.is_diagram:
            return self.source
        lines = self.source.split('\n')
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        return '\n'.join(lines)


def split_diagram_blocks(md_text: str) -> List[Segment]:
    """
    Split the buffer into alternating markdown and diagram segments.

    The result always starts and ends with a markdown segment (possibly empty),
    so N diagram fences give N + 1 markdown segments and N diagram segments.
    """
    segments = []
    pos = 0
    for match in DIAGRAM_FENCE_RE.finditer(md_text):
        segments.append(Segment(SegmentKind.MARKDOWN, md_text[pos:match.start()]))
        segments.append(Segment(SegmentKind.DIAGRAM, match.group(1)))
        pos = match.end()
    segments.append(Segment(SegmentKind.MARKDOWN, md_text[pos:]))

    logger.debug(f"Split diagram blocks: {len(segments) // 2} diagram(s), {len(segments)} segments")
    return segments


def join_segments(segments: List[Segment]) -> str:
    """Inverse of split_diagram_blocks: re-insert the fence markers."""
    parts = []
    for segment in segments:
        if segment.is_diagram:
            parts.append(f'{DIAGRAM_OPEN}{segment.source}{DIAGRAM_CLOSE}')
        else:
            parts.append(segment.source)
    return ''.join(parts)


class DiagramRenderError(Exception):
    """Raised by a diagram renderer when the source cannot be rendered."""


class DiagramRenderer(ABC):
    """
    Collaborator that turns diagram source into an HTML fragment.
    Implementations raise DiagramRenderError for invalid source.
    """

    @abstractmethod
    def render(self, source: str) -> str:
        pass


class ClientSideDiagramRenderer(DiagramRenderer):
    """
    Emit the source for mermaid.js to draw in the browser.

    Only the diagram type is checked here; full syntax errors surface client-side.
    """

    def render(self, source: str) -> str:
        diagram_type = detect_diagram_type(source)
        if diagram_type is None:
            raise DiagramRenderError("No diagram type declaration found")
        if diagram_type not in KNOWN_DIAGRAM_TYPES:
            raise DiagramRenderError(f"Unknown diagram type '{diagram_type}'")
        return f'<pre class="mermaid">{html.escape(source)}</pre>'


def detect_diagram_type(source: str) -> Optional[str]:
    """
    First keyword of the diagram, skipping blank lines, %% comments or
    directives, and a --- front matter block.
    """
    in_front_matter = False
    for index, line in enumerate(source.split('\n')):
        stripped = line.strip()
        if stripped == '---' and (index == 0 or in_front_matter):
            in_front_matter = not in_front_matter
            continue
        if in_front_matter or not stripped or stripped.startswith('%%'):
            continue
        return stripped.split()[0].rstrip(':;')
    return None


def _error_panel(title: str, source: str, message: str, index: int) -> str:
    return (
        f'<div class="diagram-error" id="diagram-{index}">'
        f'<p class="diagram-error-title">{html.escape(title)}</p>'
        f'<pre class="diagram-error-source">{html.escape(source)}</pre>'
        f'<p class="diagram-error-message">Error: {html.escape(message)}</p>'
        f'</div>'
    )


def render_diagram(source: str, renderer: Optional[DiagramRenderer] = None, index: int = 0) -> str:
    """
    Render one diagram through the collaborator.

    Failures never propagate: the preview shows an error panel with the raw
    source and the error message instead.
    """
    if not source.strip():
        return (
            f'<div class="diagram-error diagram-empty" id="diagram-{index}">'
            f'<p class="diagram-error-title">No Mermaid chart content provided</p>'
            f'</div>'
        )

    renderer = renderer or ClientSideDiagramRenderer()
    try:
        rendered = renderer.render(source)
    except DiagramRenderError as e:
        logger.warning(f"Diagram {index}: invalid source: {e}")
        return _error_panel("Invalid Mermaid syntax:", source, str(e), index)
    except Exception as e:
        logger.error(f"Diagram {index}: renderer {type(renderer).__name__} failed: {e}", exc_info=True)
        return _error_panel("Mermaid rendering error:", source, str(e), index)

    return f'<div class="diagram-block" id="diagram-{index}">{rendered}</div>'
