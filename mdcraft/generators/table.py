import logging
from typing import List, Optional

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

PLACEHOLDER_CELL = 'Data'


def generate_table(rows: int, cols: int, headers: Optional[List[str]] = None) -> str:
    """
    Markdown table skeleton: a header row, a separator row and rows - 1
    rows of placeholder cells.

    Missing headers are named 'Column N'; extra headers are dropped.
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"Table needs at least one row and one column, got {rows}x{cols}")

    headers = list(headers or [])[:cols]
    headers += [f'Column {i + 1}' for i in range(len(headers), cols)]

    lines = ['| ' + ' | '.join(headers) + ' |']
    lines.append('|' + ' --- |' * cols)
    for _ in range(rows - 1):
        lines.append('|' + f' {PLACEHOLDER_CELL} |' * cols)

    logger.debug(f"Generated {rows}x{cols} table")
    return '\n'.join(lines) + '\n'


def get_features():
    return [
        Feature("GEN_TABLE", generate_table, FeatureState.STANDARD, FeatureType.GENERATOR, meta={'alias': 'table'}),
    ]
