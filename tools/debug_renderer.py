import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.getcwd()))

from bs4 import BeautifulSoup

from mdcraft.core.preview import render_document

SAMPLE = """# Debug Sample
Intro with ***bold italic***, `code *not em*` and ~~gone~~.
- one
* two
| A | B |
| --- | --- |
| 1 | 2 |
```python
print("<b>")
```
```mermaid
graph TD
    A --> B
```
```mermaid
bogus
```
"""

def debug_renderer(text=SAMPLE):
    print(f"Input:\n{text}")

    html = render_document(text)

    print("\n--- Renderer Output (HTML) ---")
    print(html)
    print("------------------------------\n")

    # Summarize the block structure the preview produced
    soup = BeautifulSoup(html, 'html.parser')
    for tag in ('h1', 'p', 'ul', 'table', 'strong', 'em', 'del', 'code'):
        print(f"<{tag}>: {len(soup.find_all(tag))}")
    for block in soup.find_all('div', class_='code-block'):
        lang = block.find('div', class_='code-lang')
        print(f"Code block: lang={lang.get_text() if lang else None}")
    for block in soup.find_all('div', class_='diagram-block'):
        print(f"Diagram {block.get('id')}: {block.find('pre').get_text()!r}")
    for panel in soup.find_all('div', class_='diagram-error'):
        print(f"Diagram error: {panel.find('p', class_='diagram-error-message').get_text()}")

if __name__ == "__main__":
    if len(sys.argv) > 1:
        with open(sys.argv[1], 'r', encoding='utf-8') as f:
            debug_renderer(f.read())
    else:
        debug_renderer()
