"""
Selection-aware text editing.

Every operation is a pure function of (buffer, selection, args) and returns an
EditResult holding the new buffer and the new selection. Selections are
clamped to the buffer, so an out-of-range selection never raises; only a
buffer that is not a string or an invalid argument does.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Pattern, Tuple, Union

logger = logging.getLogger(__name__)

BULLET_ITEM_RE = re.compile(r'^([ \t]*)[-*+][ \t]+')
NUMBERED_ITEM_RE = re.compile(r'^([ \t]*)\d+\.[ \t]+')
# Toggle-off strips the marker and a single separator
BULLET_MARKER_RE = re.compile(r'^([ \t]*)[-*+][ \t]')
NUMBERED_MARKER_RE = re.compile(r'^([ \t]*)\d+\.[ \t]')
HEADING_RE = re.compile(r'^([ \t]*)(#{1,6})[ \t](.*)$')
LEADING_WS_RE = re.compile(r'^[ \t]*')

INDENT = '  '


@dataclass(frozen=True)
class Selection:
    start: int
    end: int

    @classmethod
    def caret(cls, position: int) -> 'Selection':
        return cls(position, position)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def clamp(self, length: int) -> 'Selection':
        """Clamp both offsets into [0, length] and order them."""
        start = min(max(self.start, 0), length)
        end = min(max(self.end, 0), length)
        if start > end:
            start, end = end, start
        return Selection(start, end)


@dataclass(frozen=True)
class EditResult:
    text: str
    selection: Selection

    @property
    def selected_text(self) -> str:
        return self.text[self.selection.start:self.selection.end]


SelectionLike = Union[Selection, Tuple[int, int]]


def _prepare(text: str, selection: SelectionLike) -> Tuple[int, int]:
    if not isinstance(text, str):
        raise TypeError(f"Text buffer must be a str, not {type(text).__name__}")
    if not isinstance(selection, Selection):
        selection = Selection(*selection)
    clamped = selection.clamp(len(text))
    if clamped != selection:
        logger.debug(f"Clamped selection {selection} to {clamped} (buffer length {len(text)})")
    return clamped.start, clamped.end


def _line_breaks(text: str, start: int, end: int) -> Tuple[str, str]:
    """Line breaks needed around text[start:end] so a replacement sits on its own line."""
    lead = '\n' if start > 0 and text[start - 1] != '\n' else ''
    trail = '\n' if end < len(text) and text[end] != '\n' else ''
    return lead, trail


def _replace_lines(text: str, start: int, end: int, new_lines: List[str]) -> EditResult:
    """Replace the selection with block content; the new selection covers that content."""
    replacement = '\n'.join(new_lines)
    lead, trail = _line_breaks(text, start, end)
    new_text = text[:start] + lead + replacement + trail + text[end:]
    new_start = start + len(lead)
    return EditResult(new_text, Selection(new_start, new_start + len(replacement)))


def _leading_ws(line: str) -> str:
    return LEADING_WS_RE.match(line).group(0)


def _all_items(lines: List[str], item_re: Pattern) -> bool:
    """True when every non-blank line is a list item of this kind (and one exists)."""
    non_blank = [line for line in lines if line.strip()]
    return bool(non_blank) and all(item_re.match(line) for line in non_blank)


def insert_at_cursor(text: str, selection: SelectionLike, before: str, after: str = '',
                     own_line: bool = False) -> EditResult:
    """
    Replace the selection with before + selection + after.

    With own_line, line breaks are added so the insertion starts and ends a
    line. The caret lands right after the inserted text.
    """
    start, end = _prepare(text, selection)
    inserted = before + text[start:end] + after
    lead, trail = _line_breaks(text, start, end) if own_line else ('', '')
    new_text = text[:start] + lead + inserted + trail + text[end:]
    return EditResult(new_text, Selection.caret(start + len(lead) + len(inserted)))


def is_bold(text: str) -> bool:
    # '***x***' is bold italic, not bold
    return (len(text) >= 4 and text.startswith('**') and text.endswith('**')
            and not text.startswith('***') and not text.endswith('***'))


def is_italic(text: str) -> bool:
    return (len(text) >= 2 and text.startswith('*') and text.endswith('*')
            and not text.startswith('**') and not text.endswith('**'))


def is_code(text: str) -> bool:
    return len(text) >= 2 and text.startswith('`') and text.endswith('`')


def _toggle_wrap(text: str, selection: SelectionLike, delimiter: str,
                 is_wrapped: Callable[[str], bool]) -> EditResult:
    start, end = _prepare(text, selection)
    selected = text[start:end]

    if not selected:
        new_text = text[:start] + delimiter + delimiter + text[end:]
        return EditResult(new_text, Selection.caret(start + len(delimiter)))

    if is_wrapped(selected):
        replacement = selected[len(delimiter):-len(delimiter)]
    else:
        replacement = f'{delimiter}{selected}{delimiter}'
    new_text = text[:start] + replacement + text[end:]
    return EditResult(new_text, Selection(start, start + len(replacement)))


def toggle_bold(text: str, selection: SelectionLike) -> EditResult:
    return _toggle_wrap(text, selection, '**', is_bold)


def toggle_italic(text: str, selection: SelectionLike) -> EditResult:
    return _toggle_wrap(text, selection, '*', is_italic)


def toggle_code(text: str, selection: SelectionLike) -> EditResult:
    return _toggle_wrap(text, selection, '`', is_code)


def heading_level(line: str) -> int:
    """Heading level of a line, 0 when it is not a heading."""
    match = HEADING_RE.match(line)
    return len(match.group(2)) if match else 0


def _strip_heading(line: str) -> str:
    match = HEADING_RE.match(line)
    if match:
        return match.group(1) + match.group(3)
    return line


def _set_heading(line: str, level: int) -> str:
    if not line.strip():
        return line
    match = HEADING_RE.match(line)
    if match:
        leading, content = match.group(1), match.group(3)
    else:
        leading = _leading_ws(line)
        content = line[len(leading):]
    return f"{leading}{'#' * level} {content}"


def toggle_heading(text: str, selection: SelectionLike, level: int) -> EditResult:
    """
    Toggle heading markers on every line touched by the selection.

    Lines already all at `level` lose their markers; otherwise every non-blank
    line is set to `level`, replacing any other heading level.
    """
    if not isinstance(level, int) or not 1 <= level <= 6:
        raise ValueError(f"Heading level must be between 1 and 6, got {level!r}")
    start, end = _prepare(text, selection)
    if start == end:
        return insert_at_cursor(text, Selection(start, end), '#' * level + ' ', own_line=True)

    lines = text[start:end].split('\n')
    non_blank = [line for line in lines if line.strip()]
    if non_blank and all(heading_level(line) == level for line in non_blank):
        new_lines = [_strip_heading(line) for line in lines]
    else:
        new_lines = [_set_heading(line, level) for line in lines]
    return _replace_lines(text, start, end, new_lines)


def convert_to_bullet_list(text: str, selection: SelectionLike) -> EditResult:
    """
    Toggle a bullet list over the selected lines.

    Bulleted lines lose their markers, numbered lines become bullets,
    anything else gets a '- ' marker at the start of the line.
    """
    start, end = _prepare(text, selection)
    if start == end:
        return insert_at_cursor(text, Selection(start, end), '- ', own_line=True)

    lines = text[start:end].split('\n')
    if _all_items(lines, BULLET_ITEM_RE):
        new_lines = [BULLET_MARKER_RE.sub(r'\1', line, count=1) for line in lines]
    elif _all_items(lines, NUMBERED_ITEM_RE):
        new_lines = [NUMBERED_ITEM_RE.sub(r'\1- ', line, count=1) for line in lines]
    else:
        new_lines = ['- ' + line for line in lines]
    return _replace_lines(text, start, end, new_lines)


def convert_to_numbered_list(text: str, selection: SelectionLike) -> EditResult:
    """
    Toggle a numbered list over the selected lines.

    Bullets are renumbered from 1 in order; plain lines are numbered by
    their position in the selection.
    """
    start, end = _prepare(text, selection)
    if start == end:
        return insert_at_cursor(text, Selection(start, end), '1. ', own_line=True)

    lines = text[start:end].split('\n')
    if _all_items(lines, NUMBERED_ITEM_RE):
        new_lines = [NUMBERED_MARKER_RE.sub(r'\1', line, count=1) for line in lines]
    elif _all_items(lines, BULLET_ITEM_RE):
        new_lines = []
        number = 0
        for line in lines:
            match = BULLET_ITEM_RE.match(line)
            if match:
                number += 1
                line = f'{match.group(1)}{number}. {line[match.end():]}'
            new_lines.append(line)
    else:
        new_lines = [f'{index + 1}. {line}' for index, line in enumerate(lines)]
    return _replace_lines(text, start, end, new_lines)


def indent(text: str, selection: SelectionLike) -> EditResult:
    """Tab key: indent every selected line, or insert two spaces at the caret."""
    start, end = _prepare(text, selection)
    if start == end:
        new_text = text[:start] + INDENT + text[end:]
        return EditResult(new_text, Selection.caret(start + len(INDENT)))

    indented = '\n'.join(INDENT + line for line in text[start:end].split('\n'))
    new_text = text[:start] + indented + text[end:]
    return EditResult(new_text, Selection(start, start + len(indented)))


# Toolbar insert actions: name -> (before, after, own_line)
TOOLBAR_SNIPPETS: Dict[str, Tuple[str, str, bool]] = {
    'link': ('[', '](url)', False),
    'image': ('![', '](url)', False),
    'strikethrough': ('~~', '~~', False),
    'quote': ('> ', '', True),
    'code_block': ('```\n', '\n```', True),
    'horizontal_rule': ('---', '', True),
    'task': ('- [ ] ', '', True),
}


def apply_snippet(text: str, selection: SelectionLike, name: str) -> EditResult:
    try:
        before, after, own_line = TOOLBAR_SNIPPETS[name]
    except KeyError:
        raise ValueError(f"Unknown snippet '{name}'. Available: {sorted(TOOLBAR_SNIPPETS)}") from None
    return insert_at_cursor(text, selection, before, after, own_line=own_line)


# Operation names used by the editing session and the CLI
EDIT_OPERATIONS: Dict[str, Callable[..., EditResult]] = {
    'insert': insert_at_cursor,
    'bold': toggle_bold,
    'italic': toggle_italic,
    'code': toggle_code,
    'heading': toggle_heading,
    'bullet_list': convert_to_bullet_list,
    'numbered_list': convert_to_numbered_list,
    'indent': indent,
    'snippet': apply_snippet,
}
