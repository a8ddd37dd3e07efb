"""
Table of contents extraction and emission.
"""
import logging
import re
from dataclasses import dataclass
from typing import List

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r'^(#{1,6})\s+(.+)$')
FENCE_RE = re.compile(r'^\s*(`{3,}|~{3,})')
SLUG_STRIP_RE = re.compile(r'[^a-z0-9]+')

TOC_TITLE = "**Table of Contents**"


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    id: str


def slugify(text: str) -> str:
    """
    Anchor id for a heading: lower-cased, every run of characters outside
    [a-z0-9] collapsed to one hyphen, leading and trailing hyphens trimmed.
    """
    return SLUG_STRIP_RE.sub('-', text.lower()).strip('-')


def extract_headings(md_text: str) -> List[Heading]:
    """Scan the buffer for ATX headings, skipping fenced code blocks."""
    headings = []
    fence = None
    for line in md_text.split('\n'):
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue

        match = HEADING_RE.match(line)
        if match:
            text = match.group(2).strip()
            headings.append(Heading(len(match.group(1)), text, slugify(text)))

    logger.debug(f"TOC: extracted {len(headings)} headings")
    return headings


def generate_toc(md_text: str, align_center: bool = True) -> str:
    """
    Emit a nested bullet list of links to every heading in the buffer.

    Returns an empty string when the buffer has no headings.
    """
    headings = extract_headings(md_text)
    if not headings:
        return ''

    toc = ''
    if align_center:
        toc += '<div align="center">\n\n'
    toc += f'{TOC_TITLE}\n\n'
    for heading in headings:
        indent = '  ' * (heading.level - 1)
        toc += f'{indent}- [{heading.text}](#{heading.id})\n'
    if align_center:
        toc += '\n</div>'
    return toc


def get_features():
    return [
        Feature("GEN_TOC", generate_toc, FeatureState.STANDARD, FeatureType.GENERATOR, meta={'alias': 'toc'}),
    ]
