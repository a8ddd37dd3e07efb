"""
shields.io badge URLs and their markdown/HTML embeddings.
"""
import html
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import quote, urlencode

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

BADGE_BASE_URL = 'https://img.shields.io/badge/'
BADGE_STYLES = ('flat', 'flat-square', 'plastic', 'for-the-badge', 'social')
DEFAULT_STYLE = 'for-the-badge'


@dataclass(frozen=True)
class BadgeSpec:
    label: str
    message: str
    color: str = '007ACC'
    logo: Optional[str] = None
    style: str = DEFAULT_STYLE


def _path_part(text: str) -> str:
    # shields.io reads '-' as the label/message separator and '_' as a space
    text = text.replace('-', '--').replace('_', '__')
    return quote(text, safe="!~*'()")


def badge_url(spec: BadgeSpec) -> str:
    params = {}
    if spec.color:
        params['color'] = spec.color.lstrip('#')
    if spec.logo:
        params['logo'] = spec.logo
    if spec.style:
        params['style'] = spec.style
    url = f'{BADGE_BASE_URL}{_path_part(spec.label)}-{_path_part(spec.message)}'
    if params:
        url += '?' + urlencode(params)
    return url


def badge_markdown(spec: BadgeSpec, linked: bool = True, link_url: Optional[str] = None) -> str:
    """
    Markdown image for the badge, wrapped in a link by default.
    The link points at `link_url`, or at the badge image itself.
    """
    url = badge_url(spec)
    image = f'![{spec.label}]({url})'
    if not linked:
        return image
    return f'[{image}]({link_url or url})'


def badge_html(spec: BadgeSpec, link_url: Optional[str] = None) -> str:
    url = html.escape(badge_url(spec))
    href = html.escape(link_url) if link_url else url
    return f'<a href="{href}" target="_blank"><img src="{url}" alt="{html.escape(spec.label)}"></a>'


def _preset(label: str, color: str, logo: str) -> BadgeSpec:
    return BadgeSpec(label=label, message=color, color=color, logo=logo)


PRESET_BADGES: Dict[str, BadgeSpec] = {
    'typescript': _preset('TypeScript', '007ACC', 'typescript'),
    'javascript': _preset('JavaScript', 'F7DF1E', 'javascript'),
    'react': _preset('React', '61DAFB', 'react'),
    'nodejs': _preset('Node.js', '339933', 'node.js'),
    'python': _preset('Python', '3776AB', 'python'),
    'html5': _preset('HTML5', 'E34F26', 'html5'),
    'css3': _preset('CSS3', '1572B6', 'css3'),
    'docker': _preset('Docker', '2496ED', 'docker'),
    'github': _preset('GitHub', '181717', 'github'),
    'git': _preset('Git', 'F05032', 'git'),
}


def get_features():
    return [
        Feature("GEN_BADGE", badge_markdown, FeatureState.STANDARD, FeatureType.GENERATOR, meta={'alias': 'badge'}),
    ]
