import html
import logging
from typing import Optional

from mdcraft.core.diagrams import DiagramRenderer, render_diagram, split_diagram_blocks
from mdcraft.core.renderer import render_markdown
from mdcraft.features.registry import FeatureManager

logger = logging.getLogger(__name__)

STANDALONE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<script type="module">
import mermaid from "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.esm.min.mjs";
mermaid.initialize({{ startOnLoad: true }});
</script>
</head>
<body>
<article class="markdown-body">
{body}
</article>
</body>
</html>
"""


def render_document(md_text: str, diagram_renderer: Optional[DiagramRenderer] = None,
                    features: Optional[FeatureManager] = None, enable_experimental: bool = False) -> str:
    """
    Full preview: text pipeline, diagram splitting, then per-segment rendering.

    Markdown segments go through the block renderer, diagram segments through
    the diagram renderer; the fragments are concatenated in source order.
    """
    if features is None:
        from mdcraft.features.catalog import build_default_manager
        features = build_default_manager()

    pipeline = features.build_pipeline(enable_experimental=enable_experimental)
    logger.debug(f"Render document: {len(md_text)} chars, {len(pipeline)} pipeline steps")
    md_text = pipeline.run(md_text)

    parts = []
    diagram_index = 0
    for segment in split_diagram_blocks(md_text):
        if segment.is_diagram:
            parts.append(render_diagram(segment.content, diagram_renderer, diagram_index))
            diagram_index += 1
        elif segment.source.strip():
            parts.append(f'<div class="markdown-segment">\n{render_markdown(segment.source)}\n</div>')

    return '\n'.join(parts)


def render_standalone(md_text: str, title: str = "Preview", **kwargs) -> str:
    """Wrap the preview fragment in a minimal HTML page that loads mermaid."""
    return STANDALONE_TEMPLATE.format(title=html.escape(title), body=render_document(md_text, **kwargs))
