import html
import logging
import re
from typing import List, Optional

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from pymdownx.saneheaders import SaneHeadersProcessor

from mdcraft.core.inline import inline_extensions
from mdcraft.generators.toc import slugify

logger = logging.getLogger(__name__)

# Block/preview rendering: markdown -> HTML fragment for the live preview

FENCED_BLOCK_RE = re.compile(
    r'^(?P<fence>`{3,})[ \t]*(?P<lang>[\w#+.-]*)[ \t]*\n'
    r'(?P<code>.*?)(?<=\n)(?P=fence)[ \t]*$',
    re.MULTILINE | re.DOTALL
)

HR_LINE_RE = re.compile(r'^[ ]{0,3}([-*_])(?:[ ]*\1){2,}[ ]*$')
ULIST_LINE_RE = re.compile(r'^[ ]{0,3}[*+-][ \t]+')
OLIST_LINE_RE = re.compile(r'^[ ]{0,3}\d+\.[ \t]+')
QUOTE_LINE_RE = re.compile(r'^[ ]{0,3}>')
TABLE_LINE_RE = re.compile(r'^[ ]{0,3}\|')
HEADING_LINE_RE = re.compile(r'^#{1,6}[ \t]')


def classify_line(line: str, previous: Optional[str]) -> Optional[str]:
    """
    Block kind of a single source line, or None for a blank line.
    Indented lines following a list item continue that list.
    """
    if not line.strip():
        return None
    if HR_LINE_RE.match(line):
        return 'hr'
    if previous in ('ulist', 'olist') and line[0] in ' \t':
        return previous
    if ULIST_LINE_RE.match(line):
        return 'ulist'
    if OLIST_LINE_RE.match(line):
        return 'olist'
    if QUOTE_LINE_RE.match(line):
        return 'quote'
    if TABLE_LINE_RE.match(line):
        return 'table'
    if HEADING_LINE_RE.match(line):
        return 'heading'
    return 'text'


class FencedCodePreprocessor(Preprocessor):
    """
    Stash ```lang fenced blocks as finished HTML.
    Content is escaped verbatim and never reaches the inline processors.
    """

    def run(self, lines: List[str]) -> List[str]:
        text = '\n'.join(lines)
        while True:
            m = FENCED_BLOCK_RE.search(text)
            if not m:
                break
            code = m.group('code')
            if code.endswith('\n'):
                code = code[:-1]
            placeholder = self.md.htmlStash.store(self.format_block(code, m.group('lang')))
            text = f'{text[:m.start()]}\n\n{placeholder}\n\n{text[m.end():]}'
        return text.split('\n')

    @staticmethod
    def format_block(code: str, lang: str) -> str:
        label = f'<div class="code-lang">{lang}</div>' if lang else ''
        css_class = f' class="language-{lang}"' if lang else ''
        return f'<div class="code-block">{label}<pre><code{css_class}>{html.escape(code)}</code></pre></div>'


class BlockBoundaryPreprocessor(Preprocessor):
    """
    Separate adjacent lines of different block kinds with a blank line.

    Python-Markdown only starts a list or table at the top of a block, so
    '- item' directly under paragraph text would otherwise stay paragraph text.
    """

    def run(self, lines: List[str]) -> List[str]:
        out = []
        previous = None
        for line in lines:
            kind = classify_line(line, previous)
            if kind is not None and previous is not None and kind != previous:
                out.append('')
            out.append(line)
            previous = kind
        return out


class AnchoredHeaderProcessor(SaneHeadersProcessor):
    """
    '#' headings (space required after the hashes) with an id slugged from
    the raw heading source, the same text the table of contents slugs.
    """

    def run(self, parent, blocks):
        m = self.RE.search(blocks[0])
        super().run(parent, blocks)
        if m is None or not len(parent):
            return
        # The heading is the last element appended; trailing lines go back to blocks
        heading = parent[-1]
        slug = slugify(m.group('header').strip())
        if slug and heading.tag == f"h{len(m.group('level'))}":
            heading.set('id', slug)


class PreviewBlocksExtension(Extension):
    def extendMarkdown(self, md):
        md.registerExtension(self)
        md.preprocessors.register(FencedCodePreprocessor(md), 'fenced_code_block', 25)
        md.preprocessors.register(BlockBoundaryPreprocessor(md), 'block_boundary', 15)
        # Indented text is plain text, not a code block
        if 'code' in md.parser.blockprocessors:
            md.parser.blockprocessors.deregister('code')
        md.parser.blockprocessors.register(AnchoredHeaderProcessor(md.parser), 'hashheader', 70)


def build_preview_markdown() -> markdown.Markdown:
    extensions, extension_configs = inline_extensions()
    return markdown.Markdown(
        extensions=extensions + [
            PreviewBlocksExtension(),
            'tables',
            'nl2br',
            'sane_lists',
        ],
        extension_configs=extension_configs,
        output_format='html',
    )


def render_markdown(md_text: str) -> str:
    """
    Render a markdown segment (no diagram fences) to an HTML fragment.
    Never raises for malformed content; it degrades to literal text.
    """
    md_instance = build_preview_markdown()
    logger.debug(f"Render markdown: {len(md_text)} chars input")
    return md_instance.convert(md_text)
