"""
Turn feed XML into plain nested dicts.

Conventions:
- element names carry their namespace prefix (`dc:creator`, `media:group`);
  elements in the document's default namespace use their local name
- a childless element without attributes becomes its text (or None)
- other elements become dicts: attributes under `@name`, children under
  their names, non-blank text under `#text` (for mixed content, the text
  of the whole subtree)
- repeated siblings collapse into a list in document order
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .exceptions import FeedStructureError

# Canonical prefixes, used whatever prefix a document happens to declare.
KNOWN_NAMESPACES: Dict[str, str] = {
    "http://purl.org/dc/elements/1.1/": "dc",
    "http://purl.org/rss/1.0/modules/content/": "content",
    "http://search.yahoo.com/mrss/": "media",
    "http://www.youtube.com/xml/schemas/2015": "yt",
    "http://www.w3.org/1999/02/22-rdf-syntax-ns#": "rdf",
    "http://www.w3.org/2005/Atom": "atom",
    "http://www.itunes.com/dtds/podcast-1.0.dtd": "itunes",
    "http://www.w3.org/XML/1998/namespace": "xml",
}


class _Names:
    def __init__(self) -> None:
        self.prefixes: Dict[str, str] = {}
        self.defaults: Set[str] = set()

    def declare(self, prefix: str, uri: str) -> None:
        if not prefix:
            self.defaults.add(uri)
        else:
            self.prefixes.setdefault(uri, prefix)

    def qualify(self, tag: str) -> str:
        if not tag.startswith("{"):
            return tag
        uri, local = tag[1:].split("}", 1)
        if uri in self.defaults:
            return local
        prefix = KNOWN_NAMESPACES.get(uri) or self.prefixes.get(uri)
        return f"{prefix}:{local}" if prefix else local


def _is_mixed(elem: ET.Element, children: List[ET.Element]) -> bool:
    if elem.text and elem.text.strip():
        return True
    return any(child.tail and child.tail.strip() for child in children)


def _node(elem: ET.Element, children: List[ET.Element], values: List[Any],
          names: _Names, force_list: Set[str]) -> Any:
    if not elem.attrib and not children:
        return elem.text or None

    node: Dict[str, Any] = {}
    for key, value in elem.attrib.items():
        node["@" + names.qualify(key)] = value

    for child, value in zip(children, values):
        name = names.qualify(child.tag)
        if name in node:
            existing = node[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                node[name] = [existing, value]
        elif name in force_list:
            node[name] = [value]
        else:
            node[name] = value

    if not children:
        if elem.text and elem.text.strip():
            node["#text"] = elem.text
    elif _is_mixed(elem, children):
        # text interleaved with markup, e.g. <title>Foo <b>bar</b></title>
        node["#text"] = "".join(elem.itertext())
    return node


def _convert(root: ET.Element, names: _Names, force_list: Set[str]) -> Any:
    # post-order walk with an explicit stack; feeds can nest deeper than the recursion limit
    converted: Dict[int, Any] = {}
    stack: List[Tuple[ET.Element, bool]] = [(root, False)]
    while stack:
        elem, expanded = stack.pop()
        children = list(elem)
        if children and not expanded:
            stack.append((elem, True))
            stack.extend((child, False) for child in reversed(children))
            continue
        values = [converted.pop(id(child)) for child in children]
        converted[id(elem)] = _node(elem, children, values, names, force_list)
    return converted[id(root)]


def parse_xml(markup: str, force_list: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Parse XML text into `{root_name: value}`.

    Names listed in `force_list` always map to lists, even for a single
    occurrence. Raises FeedStructureError if the markup is not well-formed.
    """
    parser = ET.XMLPullParser(events=("start-ns", "start"))
    names = _Names()
    root: Optional[ET.Element] = None

    def drain() -> None:
        nonlocal root
        for event, payload in parser.read_events():
            if event == "start-ns":
                prefix, uri = payload
                names.declare(prefix, uri)
            elif root is None:
                root = payload

    try:
        parser.feed(markup)
        drain()
        parser.close()
        drain()
    except ET.ParseError as e:
        raise FeedStructureError(f"Invalid XML: {e}") from e

    if root is None:
        raise FeedStructureError("Invalid XML: no root element")
    return {names.qualify(root.tag): _convert(root, names, set(force_list))}
