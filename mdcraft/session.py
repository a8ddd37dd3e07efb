"""
Editing host: owns the buffer, the selection and the undo history, and
routes editing operations, generators and previews through the core.
"""
import logging
from typing import Any, Callable, Dict, Optional, Union

from mdcraft.core.editing import EDIT_OPERATIONS, EditResult, Selection, insert_at_cursor
from mdcraft.core.history import DEFAULT_HISTORY_LIMIT, EditHistory
from mdcraft.core.preview import render_document
from mdcraft.features.catalog import build_default_manager
from mdcraft.features.registry import FeatureManager
from mdcraft.generators.toc import generate_toc

logger = logging.getLogger(__name__)

WELCOME_DOCUMENT = """# Welcome to GitHub Markdown Editor

This is a **powerful** markdown editor for creating GitHub documentation.

## Features
- **Bold** and *italic* text
- Headers (H1-H6)
- Lists and tables
- Code blocks
- Mermaid diagrams
- Emoji support
- And much more!

### Code Example
```javascript
function hello() {
  console.log("Hello, World!");
}
```

### Mermaid Diagram
```mermaid
graph TD
    A[Start] --> B{Is it working?}
    B -->|Yes| C[Great!]
    B -->|No| D[Fix it]
    D --> B
```
"""


class EditorSession:
    def __init__(self, text: str = WELCOME_DOCUMENT, history_limit: int = DEFAULT_HISTORY_LIMIT,
                 features: Optional[FeatureManager] = None, enable_experimental: bool = False,
                 toc_align_center: bool = True):
        if not isinstance(text, str):
            raise TypeError(f"Text buffer must be a str, not {type(text).__name__}")
        self._text = text
        self._selection = Selection.caret(len(text))
        self.history = EditHistory(text, limit=history_limit)
        self.features = features or build_default_manager()
        self.enable_experimental = enable_experimental
        self.toc_align_center = toc_align_center

    @classmethod
    def from_config(cls, config: Dict[str, Any], text: str = WELCOME_DOCUMENT, **kwargs) -> 'EditorSession':
        """Session set up from a load_config() dict."""
        return cls(text, history_limit=config['history_limit'],
                   enable_experimental=config['enable_experimental'],
                   toc_align_center=config['toc_align_center'], **kwargs)

    @property
    def text(self) -> str:
        return self._text

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def selected_text(self) -> str:
        return self._text[self._selection.start:self._selection.end]

    def select(self, start: int, end: Optional[int] = None) -> Selection:
        self._selection = Selection(start, start if end is None else end).clamp(len(self._text))
        return self._selection

    def _commit(self, result: EditResult) -> EditResult:
        self._text = result.text
        self._selection = result.selection
        self.history.push(result.text)
        return result

    def apply(self, operation: Union[str, Callable[..., EditResult]], *args, **kwargs) -> EditResult:
        """
        Run an editing operation (a callable or a name from EDIT_OPERATIONS)
        on the current buffer and selection, and record the result.
        """
        if isinstance(operation, str):
            try:
                operation = EDIT_OPERATIONS[operation]
            except KeyError:
                raise ValueError(f"Unknown operation '{operation}'. Available: {sorted(EDIT_OPERATIONS)}") from None
        result = operation(self._text, self._selection, *args, **kwargs)
        logger.debug(f"Session: applied {getattr(operation, '__name__', operation)}, selection {result.selection}")
        return self._commit(result)

    def insert_fragment(self, fragment: str) -> EditResult:
        """Insert a generated block on its own line at the caret."""
        return self.apply(insert_at_cursor, fragment, '', own_line=True)

    def generate(self, name: str, *args, **kwargs) -> EditResult:
        """Run a registered generator and insert its output."""
        handler = self.features.get_generator(name)
        if handler is None:
            raise LookupError(f"No generator named '{name}'")
        return self.insert_fragment(handler(*args, **kwargs))

    def insert_toc(self, align_center: Optional[bool] = None) -> Optional[EditResult]:
        """Insert a table of contents for the current buffer; None when it has no headings."""
        if align_center is None:
            align_center = self.toc_align_center
        toc = generate_toc(self._text, align_center=align_center)
        if not toc:
            logger.info("Session: no headings, table of contents not inserted")
            return None
        return self.insert_fragment(toc)

    def undo(self) -> bool:
        content = self.history.undo()
        if content is None:
            logger.debug("Session: nothing to undo")
            return False
        self._text = content
        self._selection = self._selection.clamp(len(content))
        return True

    def redo(self) -> bool:
        content = self.history.redo()
        if content is None:
            logger.debug("Session: nothing to redo")
            return False
        self._text = content
        self._selection = self._selection.clamp(len(content))
        return True

    def load(self, content: str):
        """Replace the buffer (e.g. a file was opened); history starts over."""
        if not isinstance(content, str):
            raise TypeError(f"Text buffer must be a str, not {type(content).__name__}")
        self._text = content
        self._selection = Selection.caret(0)
        self.history.reset(content)
        logger.info(f"Session: loaded {len(content)} chars")

    def preview(self, **kwargs) -> str:
        return render_document(self._text, features=self.features,
                               enable_experimental=self.enable_experimental, **kwargs)
