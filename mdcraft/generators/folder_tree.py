"""
ASCII folder-tree generation.

Trees are tuples of frozen FolderNode values; add/remove/toggle rebuild the
path to the edited node and return a new forest.
"""
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

FILE = 'file'
FOLDER = 'folder'

TEE = '├── '
CORNER = '└── '
PIPE = '│   '
BLANK = '    '

STRUCTURE_HEADING = '## Project Structure'


@dataclass(frozen=True)
class FolderNode:
    id: str
    name: str
    kind: str = FILE
    expanded: bool = True
    children: Tuple['FolderNode', ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.kind not in (FILE, FOLDER):
            raise ValueError(f"Unknown node kind '{self.kind}'")
        object.__setattr__(self, 'children', tuple(self.children))
        if self.kind == FILE and self.children:
            raise ValueError(f"File '{self.name}' cannot have children")

    @property
    def is_folder(self) -> bool:
        return self.kind == FOLDER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FolderNode':
        """Build a node from plain JSON data ('type' is accepted for 'kind')."""
        kind = data.get('kind', data.get('type'))
        children = data.get('children') or []
        if kind is None:
            kind = FOLDER if children or data['name'].endswith('/') else FILE
        return cls(
            id=str(data.get('id') or _new_id()),
            name=data['name'],
            kind=kind,
            expanded=data.get('expanded', True) is not False,
            children=tuple(cls.from_dict(child) for child in children),
        )


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


def make_item(name: str, kind: str = FILE, item_id: Optional[str] = None) -> FolderNode:
    """New tree item; folder names get a trailing '/'."""
    if kind == FOLDER and not name.endswith('/'):
        name += '/'
    return FolderNode(id=item_id or _new_id(), name=name, kind=kind)


def iter_nodes(nodes: Sequence[FolderNode]) -> Iterator[FolderNode]:
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)


def find_node(nodes: Sequence[FolderNode], node_id: str) -> Optional[FolderNode]:
    return next((n for n in iter_nodes(nodes) if n.id == node_id), None)


def _tree_lines(nodes: Sequence[FolderNode], prefix: str) -> List[str]:
    lines = []
    for index, node in enumerate(nodes):
        is_last = index == len(nodes) - 1
        lines.append(prefix + (CORNER if is_last else TEE) + node.name)
        if node.children and node.expanded:
            lines += _tree_lines(node.children, prefix + (BLANK if is_last else PIPE))
    return lines


def render_tree(nodes: Sequence[FolderNode]) -> str:
    """
    Render the forest as an ASCII tree.

    Roots are written bare; collapsed folders are listed without their children.
    """
    lines = []
    for node in nodes:
        lines.append(node.name)
        if node.children and node.expanded:
            lines += _tree_lines(node.children, '')
    return '\n'.join(lines)


def generate_folder_structure(nodes: Sequence[FolderNode]) -> str:
    """Tree wrapped in a 'Project Structure' section with a code fence."""
    return f'{STRUCTURE_HEADING}\n```\n{render_tree(nodes)}\n```'


def add_item(nodes: Sequence[FolderNode], item: FolderNode, parent_id: Optional[str] = None) -> Tuple[FolderNode, ...]:
    """
    Append `item` under the folder `parent_id` (or at the top level) and
    expand that folder. Ids must stay unique across the tree.
    """
    existing = {n.id for n in iter_nodes(nodes)}
    clashes = existing & {n.id for n in iter_nodes([item])}
    if clashes:
        raise ValueError(f"Duplicate node ids: {sorted(clashes)}")

    if parent_id is None:
        return tuple(nodes) + (item,)

    parent = find_node(nodes, parent_id)
    if parent is None:
        raise KeyError(parent_id)
    if not parent.is_folder:
        raise ValueError(f"Cannot add items to file '{parent.name}'")

    def _add(items):
        result = []
        for node in items:
            if node.id == parent_id:
                node = replace(node, children=node.children + (item,), expanded=True)
            elif node.children:
                node = replace(node, children=_add(node.children))
            result.append(node)
        return tuple(result)

    logger.debug(f"Folder tree: added {item.name} under {parent.name}")
    return _add(nodes)


def remove_item(nodes: Sequence[FolderNode], node_id: str) -> Tuple[FolderNode, ...]:
    """Drop the node (and its subtree) wherever it is."""
    result = []
    for node in nodes:
        if node.id == node_id:
            continue
        if node.children:
            node = replace(node, children=remove_item(node.children, node_id))
        result.append(node)
    return tuple(result)


def toggle_expanded(nodes: Sequence[FolderNode], node_id: str) -> Tuple[FolderNode, ...]:
    result = []
    for node in nodes:
        if node.id == node_id:
            node = replace(node, expanded=not node.expanded)
        elif node.children:
            node = replace(node, children=toggle_expanded(node.children, node_id))
        result.append(node)
    return tuple(result)


def tree_from_json(data: List[Dict[str, Any]]) -> Tuple[FolderNode, ...]:
    return tuple(FolderNode.from_dict(item) for item in data)


DEFAULT_FOLDER_STRUCTURE = tree_from_json([
    {'id': '1', 'name': 'src/', 'type': FOLDER, 'children': [
        {'id': '2', 'name': 'components/', 'type': FOLDER, 'children': [
            {'id': '3', 'name': 'Header.tsx', 'type': FILE},
            {'id': '4', 'name': 'Footer.tsx', 'type': FILE},
        ]},
        {'id': '5', 'name': 'utils/', 'type': FOLDER, 'expanded': False, 'children': [
            {'id': '6', 'name': 'helpers.ts', 'type': FILE},
        ]},
        {'id': '7', 'name': 'index.ts', 'type': FILE},
    ]},
    {'id': '8', 'name': 'package.json', 'type': FILE},
    {'id': '9', 'name': 'README.md', 'type': FILE},
])


def get_features():
    return [
        Feature("GEN_FOLDER_TREE", generate_folder_structure, FeatureState.STANDARD, FeatureType.GENERATOR, meta={'alias': 'tree'}),
    ]
