"""
Mermaid diagram generation from a node/edge graph configuration.

DiagramConfig is immutable: every edit returns a new config and never touches
the one a preview may still be rendering from.
"""
import datetime
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

DIAGRAM_KINDS = ('flowchart', 'sequence', 'gantt', 'pie')
DIRECTIONS = ('TD', 'TB', 'LR', 'BT', 'RL')
THEMES = ('default', 'dark', 'forest', 'neutral')
EDGE_STYLES = ('solid', 'dotted', 'thick')

# shape -> (opening bracket, closing bracket)
NODE_SHAPES = {
    'rect': ('[', ']'),
    'diamond': ('{', '}'),
    'circle': ('((', '))'),
    'rounded': ('(', ')'),
    'stadium': ('([', '])'),
    'subroutine': ('[[', ']]'),
    'cylindrical': ('[(', ')]'),
}

FLOW_ARROWS = {
    'solid': '-->',
    'dotted': '-.->',
    'thick': '==>',
}

SEQUENCE_ARROWS = {
    'solid': '->>',
    'dotted': '-->>',
    'thick': '->>',
}

DEFAULT_NODE_COLOR = '#374151'
DEFAULT_MESSAGE = 'Message'
GANTT_STEP_DAYS = 7
PIE_VALUE_RANGE = (10, 59)


@dataclass(frozen=True)
class DiagramNode:
    id: str
    label: str
    shape: str = 'rect'
    color: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Diagram node id must not be empty")
        if self.shape not in NODE_SHAPES:
            raise ValueError(f"Unknown node shape '{self.shape}'. Expected one of {sorted(NODE_SHAPES)}")


@dataclass(frozen=True)
class DiagramEdge:
    source: str
    target: str
    label: str = ''
    style: str = 'solid'

    def __post_init__(self):
        if self.style not in EDGE_STYLES:
            raise ValueError(f"Unknown edge style '{self.style}'. Expected one of {list(EDGE_STYLES)}")


@dataclass(frozen=True)
class DiagramConfig:
    kind: str = 'flowchart'
    direction: str = 'TD'
    theme: str = 'default'
    nodes: Tuple[DiagramNode, ...] = field(default_factory=tuple)
    edges: Tuple[DiagramEdge, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.kind not in DIAGRAM_KINDS:
            raise ValueError(f"Unknown diagram kind '{self.kind}'. Expected one of {list(DIAGRAM_KINDS)}")
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction '{self.direction}'. Expected one of {list(DIRECTIONS)}")
        object.__setattr__(self, 'nodes', tuple(self.nodes))
        object.__setattr__(self, 'edges', tuple(self.edges))

        ids = [node.id for node in self.nodes]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate node ids in {ids}")
        for edge in self.edges:
            if edge.source not in ids or edge.target not in ids:
                raise ValueError(f"Edge {edge.source} -> {edge.target} references an unknown node")

    def node_ids(self):
        return [node.id for node in self.nodes]

    def _next_node_id(self) -> str:
        taken = set(self.node_ids())
        index = len(self.nodes)
        while True:
            # A..Z, then A1..Z1, ...
            letter = chr(65 + index % 26)
            candidate = letter if index < 26 else f'{letter}{index // 26}'
            if candidate not in taken:
                return candidate
            index += 1

    def add_node(self, node: Optional[DiagramNode] = None) -> 'DiagramConfig':
        if node is None:
            node_id = self._next_node_id()
            node = DiagramNode(node_id, f'Node {node_id}', 'rect', DEFAULT_NODE_COLOR)
        return replace(self, nodes=self.nodes + (node,))

    def remove_node(self, node_id: str) -> 'DiagramConfig':
        """Remove a node and every edge that references it."""
        if node_id not in self.node_ids():
            raise KeyError(node_id)
        nodes = tuple(n for n in self.nodes if n.id != node_id)
        edges = tuple(e for e in self.edges if e.source != node_id and e.target != node_id)
        logger.debug(f"Diagram: removed node {node_id} and {len(self.edges) - len(edges)} edge(s)")
        return replace(self, nodes=nodes, edges=edges)

    def update_node(self, node_id: str, **changes) -> 'DiagramConfig':
        """Change node fields. Renaming the id carries its edges along."""
        if node_id not in self.node_ids():
            raise KeyError(node_id)
        new_id = changes.get('id', node_id)
        nodes = tuple(replace(n, **changes) if n.id == node_id else n for n in self.nodes)
        edges = self.edges
        if new_id != node_id:
            edges = tuple(
                replace(e,
                        source=new_id if e.source == node_id else e.source,
                        target=new_id if e.target == node_id else e.target)
                for e in self.edges
            )
        return replace(self, nodes=nodes, edges=edges)

    def add_edge(self, source: Optional[str] = None, target: Optional[str] = None,
                 label: str = '', style: str = 'solid') -> 'DiagramConfig':
        """
        Connect two nodes. Without endpoints the first two nodes are linked;
        with fewer than two nodes that is a no-op.
        """
        if source is None or target is None:
            if len(self.nodes) < 2:
                logger.debug("Diagram: add_edge needs at least two nodes, ignoring")
                return self
            source = source or self.nodes[0].id
            target = target or self.nodes[1].id
        return replace(self, edges=self.edges + (DiagramEdge(source, target, label, style),))

    def remove_edge(self, index: int) -> 'DiagramConfig':
        if not 0 <= index < len(self.edges):
            raise IndexError(f"Edge index {index} out of range")
        return replace(self, edges=self.edges[:index] + self.edges[index + 1:])

    def update_edge(self, index: int, **changes) -> 'DiagramConfig':
        if not 0 <= index < len(self.edges):
            raise IndexError(f"Edge index {index} out of range")
        edges = tuple(replace(e, **changes) if i == index else e for i, e in enumerate(self.edges))
        return replace(self, edges=edges)

    def load_preset(self, name: str) -> 'DiagramConfig':
        """Replace nodes and edges with a preset template, keeping kind, direction and theme."""
        try:
            preset = PRESET_TEMPLATES[name]
        except KeyError:
            raise ValueError(f"Unknown preset '{name}'. Available: {sorted(PRESET_TEMPLATES)}") from None
        return replace(self, nodes=preset.nodes, edges=preset.edges)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiagramConfig':
        """Build a config from plain JSON data; edges may use 'from'/'to' keys."""
        nodes = [DiagramNode(**n) for n in data.get('nodes', [])]
        edges = []
        for e in data.get('edges', data.get('connections', [])):
            edges.append(DiagramEdge(
                source=e.get('source', e.get('from')),
                target=e.get('target', e.get('to')),
                label=e.get('label', ''),
                style=e.get('style', 'solid'),
            ))
        return cls(
            kind=data.get('kind', data.get('type', 'flowchart')),
            direction=data.get('direction', 'TD'),
            theme=data.get('theme', 'default'),
            nodes=nodes,
            edges=edges,
        )


def _preset(nodes, edges):
    return DiagramConfig(nodes=tuple(DiagramNode(*n) for n in nodes), edges=tuple(DiagramEdge(*e) for e in edges))


PRESET_TEMPLATES = {
    'basic_flow': _preset(
        [('A', 'Start', 'rect', '#10B981'), ('B', 'Process', 'rect', '#F59E0B'),
         ('C', 'Decision', 'diamond', '#EF4444'), ('D', 'End', 'rect', '#3B82F6')],
        [('A', 'B', 'Begin'), ('B', 'C', 'Check'), ('C', 'D', 'Complete')],
    ),
    'user_journey': _preset(
        [('A', 'Login', 'rect', '#10B981'), ('B', 'Dashboard', 'rect', '#F59E0B'),
         ('C', 'Action', 'diamond', '#EF4444'), ('D', 'Result', 'rect', '#3B82F6')],
        [('A', 'B', 'Success'), ('B', 'C', 'Select'), ('C', 'D', 'Process')],
    ),
}

DEFAULT_DIAGRAM = _preset(
    [('A', 'Start', 'rect', DEFAULT_NODE_COLOR), ('B', 'Process', 'rect', DEFAULT_NODE_COLOR),
     ('C', 'Decision', 'diamond', DEFAULT_NODE_COLOR), ('D', 'End', 'rect', DEFAULT_NODE_COLOR)],
    [('A', 'B', 'Start Process'), ('B', 'C', 'Check'), ('C', 'D', 'Complete')],
)


def _flowchart_lines(config: DiagramConfig):
    lines = [f'graph {config.direction}']
    for node in config.nodes:
        opening, closing = NODE_SHAPES[node.shape]
        lines.append(f'    {node.id}{opening}{node.label}{closing}')
        if node.color:
            lines.append(f'    style {node.id} fill:{node.color}')
    for edge in config.edges:
        arrow = FLOW_ARROWS[edge.style]
        if edge.label:
            arrow = f'{arrow}|{edge.label}|'
        lines.append(f'    {edge.source} {arrow} {edge.target}')
    return lines


def _sequence_lines(config: DiagramConfig):
    lines = ['sequenceDiagram']
    for node in config.nodes:
        lines.append(f'    participant {node.id} as {node.label}')
    for edge in config.edges:
        arrow = SEQUENCE_ARROWS[edge.style]
        lines.append(f'    {edge.source}{arrow}{edge.target}: {edge.label or DEFAULT_MESSAGE}')
    return lines


def _gantt_lines(config: DiagramConfig, today: datetime.date):
    lines = [
        'gantt',
        '    title Project Timeline',
        '    dateFormat YYYY-MM-DD',
        '    section Planning',
    ]
    for index, node in enumerate(config.nodes):
        start = today + datetime.timedelta(days=GANTT_STEP_DAYS * index)
        lines.append(f'    {node.label} :{node.id.lower()}, {start.isoformat()}, {GANTT_STEP_DAYS}d')
    return lines


def _pie_lines(config: DiagramConfig, rng: random.Random):
    lines = ['pie title Data Distribution']
    low, high = PIE_VALUE_RANGE
    for node in config.nodes:
        lines.append(f'    "{node.label}" : {rng.randint(low, high)}')
    return lines


def generate_diagram(config: DiagramConfig = DEFAULT_DIAGRAM, today: Optional[datetime.date] = None,
                     rng: Optional[random.Random] = None) -> str:
    """
    Fenced mermaid source for the configured diagram.

    `today` anchors gantt bars and `rng` draws pie slice values; both default
    to the real clock and a fresh random generator.
    """
    lines = []
    if config.theme and config.theme != 'default':
        # The init directive must come before the diagram declaration
        lines.append(f"%%{{init: {{'theme':'{config.theme}'}}}}%%")

    if config.kind == 'flowchart':
        lines += _flowchart_lines(config)
    elif config.kind == 'sequence':
        lines += _sequence_lines(config)
    elif config.kind == 'gantt':
        lines += _gantt_lines(config, today or datetime.date.today())
    elif config.kind == 'pie':
        lines += _pie_lines(config, rng or random.Random())

    logger.debug(f"Generated {config.kind} diagram: {len(config.nodes)} nodes, {len(config.edges)} edges")
    return '```mermaid\n' + '\n'.join(lines) + '\n```'


def get_features():
    return [
        Feature("GEN_DIAGRAM", generate_diagram, FeatureState.STANDARD, FeatureType.GENERATOR, meta={'alias': 'diagram'}),
    ]
