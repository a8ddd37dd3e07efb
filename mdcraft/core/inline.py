"""
Inline span formatting (images, emphasis, strikethrough, code spans, links).

Spans are tokenized by Python-Markdown's inline processors, so precedence is
set by processor priority instead of by the order of string replacements:

    backtick (190) > link (160, never after '!') > image (150)
    > em_strong (60, triple before double before single) > tilde

Code span content is literal and never re-matched by the emphasis rules.
"""
import logging
import re

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import LINK_RE, LinkInlineProcessor

logger = logging.getLogger(__name__)

# Block processors that would turn a bare line into a block element.
# The inline formatter keeps only paragraphs so '# x' or '- x' stay literal.
INLINE_ONLY_DROPPED_BLOCKS = (
    'indent', 'code', 'hashheader', 'setextheader', 'hr',
    'olist', 'ulist', 'quote', 'reference',
)

PARAGRAPH_JOIN_RE = re.compile(r'</p>\n<p>')

LINK_TARGET = '_blank'
LINK_REL = 'noopener noreferrer'


class NewTabLinkInlineProcessor(LinkInlineProcessor):
    """`[text](url)` links that open in a new browsing context."""

    def handleMatch(self, m, data):
        el, start, end = super().handleMatch(m, data)
        if el is not None:
            el.set('target', LINK_TARGET)
            el.set('rel', LINK_REL)
        return el, start, end


class InlineFormattingExtension(Extension):
    """Swap the stock link processor for the new-tab variant."""

    def extendMarkdown(self, md):
        md.inlinePatterns.register(NewTabLinkInlineProcessor(LINK_RE, md), 'link', 160)


class InlineOnlyExtension(Extension):
    """Strip every block construct except paragraphs."""

    def extendMarkdown(self, md):
        for name in INLINE_ONLY_DROPPED_BLOCKS:
            if name in md.parser.blockprocessors:
                md.parser.blockprocessors.deregister(name)


def inline_extensions():
    """Extensions and configs shared by the inline formatter and the block renderer."""
    extensions = [
        InlineFormattingExtension(),
        'pymdownx.tilde',
    ]
    extension_configs = {
        # '~x~' subscript is not part of the supported syntax; '~~x~~' is <del>
        'pymdownx.tilde': {'subscript': False},
    }
    return extensions, extension_configs


def format_inline(text: str) -> str:
    """
    Convert inline markdown spans to HTML.

    Malformed syntax is left as literal (escaped) text. Blank-line separated
    runs are joined back with a blank line instead of being wrapped in <p>.
    """
    extensions, extension_configs = inline_extensions()
    md = markdown.Markdown(
        extensions=extensions + [InlineOnlyExtension()],
        extension_configs=extension_configs,
        output_format='html',
    )
    html_output = md.convert(text)
    html_output = PARAGRAPH_JOIN_RE.sub('\n\n', html_output)
    if html_output.startswith('<p>') and html_output.endswith('</p>'):
        html_output = html_output[len('<p>'):-len('</p>')]
    logger.debug(f"Inline format: {len(text)} chars in, {len(html_output)} chars out")
    return html_output
