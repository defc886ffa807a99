import os
from pathlib import Path
from typing import Union

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

GUIDELINES_FILENAME = "DESIGN_GUIDELINES.md"

GUIDELINES_CONTENT = """# Design Guidelines for Mockup Review

Use these rules when generating UI/UX mockups as HTML+CSS. The mockups are
uploaded to a review tool that renders them in a sandboxed iframe.

## Rendering Constraints

### No JavaScript
The viewer uses a sandboxed iframe (`sandbox="allow-same-origin"`).
**Scripts will not execute.** Everything visual must be plain HTML and CSS.

- No `<script>` tags
- No inline `onclick` or other event handlers
- No JS-dependent libraries (Alpine.js, HTMX, ...)

### Self-Contained, No External Resources
The reviewer serves files from the uploaded directory only.

**Do not use:**
- Google Fonts via a `<link>` URL
- Tailwind/Bootstrap from a CDN
- External image URLs
- Any `https://` reference in `<link>`, `<script>` or `<img>` tags

**Instead:**
- Download fonts and reference them locally: `./fonts/Inter.woff2`
- Ship CSS files in the directory: `./styles/main.css`
- Keep images local: `./images/hero.png`

### File Structure
```
my-design/
|-- index.html          # Main page (required)
|-- about.html          # Additional pages (optional)
|-- styles/
|   `-- main.css
|-- images/
|   `-- logo.png
`-- fonts/
    `-- Inter.woff2
```

- Each screen or page is a **separate HTML file** at the top level
- The reviewer shows a tab for each top-level `.html` file
- Do not use `<a>` links for page navigation; the reviewer uses tabs
- `index.html` is loaded first
- Files and folders starting with `.` are not uploaded

### Design for 1440px Width
The viewer displays mockups at desktop width (1440px) by default.

### CSS Features That Work
- CSS Grid and Flexbox
- Custom properties (`--var`)
- Transitions and animations (`@keyframes`)
- Media queries (desktop is the default view)
- `:hover`, `:focus`, `:nth-child` and other pseudo-classes
- `calc()`, `clamp()`, `min()`, `max()`

### What Won't Work
- Anything requiring JavaScript (click handlers, toggles, modals)
- Loading external resources
- `<iframe>` inside the mockup
- `<form>` submissions

## Limits
- At most 1000 files per upload
- At most 500MB uncompressed, 50MB compressed

## Tips for Best Results
- Use semantic HTML (`<header>`, `<nav>`, `<main>`, `<section>`, ...)
- Keep the layout visually clear; reviewers drop pin annotations on it
- Use realistic placeholder content (names, text, images)
- Show different states (empty, filled, error) as separate HTML files
"""


def write_guidelines(directory: Union[str, Path] = ".") -> bool:
    """
    Create DESIGN_GUIDELINES.md in ``directory``.

    Returns False, leaving the file untouched, when it already exists.
    """
    path = Path(directory) / GUIDELINES_FILENAME
    if path.exists():
        logger.info("%s already exists, skipping.", GUIDELINES_FILENAME)
        return False

    if not os.path.isdir(directory):
        raise NotADirectoryError(f"not a directory: {directory}")

    path.write_text(GUIDELINES_CONTENT, encoding="utf-8")
    return True
