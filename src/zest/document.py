"""Document tree: XML text -> ElementTree elements, plus the structural queries the builder uses.

Paths are "/"-separated steps, each a tag name or "*", matched against direct
element children only: "steps/*", "tags/tag", "base/*".
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, Optional

from zest.errors import DocumentError

Element = ET.Element


def load(source: str, path: Optional[str] = None) -> Element:
    """Parse XML text into its root element."""
    try:
        return ET.fromstring(source)
    except ET.ParseError as e:
        raise DocumentError(f"Malformed XML document: {e}", path=path) from e


def load_file(path: Path) -> Element:
    return load(Path(path).read_text(encoding="utf-8"), path=str(path))


def _children(element: Element, name: str) -> Iterator[Element]:
    for child in element:
        # comments and processing instructions have a non-str tag
        if not isinstance(child.tag, str):
            continue
        if name == "*" or child.tag == name:
            yield child


def select(element: Element, path: str) -> list[Element]:
    """All elements reached by following path from element, in document order."""
    current = [element]
    for step in path.split("/"):
        current = [child for parent in current for child in _children(parent, step)]
    return current


def select_first(element: Element, path: str) -> Optional[Element]:
    matches = select(element, path)
    return matches[0] if matches else None


def first_element(element: Element) -> Optional[Element]:
    return next(_children(element, "*"), None)


def text(element: Element) -> str:
    """Text content of element and all of its descendants."""
    return "".join(element.itertext())


def raw(element: Element) -> str:
    return ET.tostring(element, encoding="unicode").strip()


def find_project(root: Element) -> Optional[Element]:
    return next(root.iter("project"), None)
