"""
Standard text algorithms run on every document before it is rendered.
"""
import logging
import re

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

BOM = '\ufeff'
TRAILING_WS_RE = re.compile(r'[ \t]+$', re.MULTILINE)


def normalize_line_endings(md_text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return md_text.replace('\r\n', '\n').replace('\r', '\n')


def strip_bom(md_text: str) -> str:
    if md_text.startswith(BOM):
        logger.debug("Stripped byte order mark")
        return md_text[len(BOM):]
    return md_text


def strip_trailing_whitespace(md_text: str) -> str:
    # Also drops markdown's two-space hard breaks; soft breaks already render as <br>
    return TRAILING_WS_RE.sub('', md_text)


def get_features():
    return [
        Feature("STD_STRIP_BOM", strip_bom, FeatureState.STANDARD, FeatureType.ALGORITHM),
        Feature("STD_LINE_ENDINGS", normalize_line_endings, FeatureState.STANDARD, FeatureType.ALGORITHM),
        Feature("SMART_TRAILING_WS", strip_trailing_whitespace, FeatureState.EXPERIMENTAL, FeatureType.ALGORITHM),
    ]
