"""Markup loader: a minimal queryable document built on html.parser."""

from __future__ import annotations

from html.parser import HTMLParser


class MarkupElement:
    """A start tag found in a document, with its attributes."""

    __slots__ = ("tag", "attrs", "line")

    def __init__(self, tag: str, attrs: dict[str, str], line: int):
        self.tag = tag
        self.attrs = attrs
        self.line = line

    def get(self, attribute: str) -> str | None:
        return self.attrs.get(attribute.lower())

    def __repr__(self) -> str:
        return f"<MarkupElement {self.tag} line={self.line} attrs={self.attrs!r}>"


class _ElementCollector(HTMLParser):
    """HTMLParser subclass that records every start tag in document order."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.elements: list[MarkupElement] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]):
        attributes: dict[str, str] = {}
        for name, value in attrs:
            # First occurrence wins for repeated attributes; valueless ones read as ""
            attributes.setdefault(name, value if value is not None else "")
        self.elements.append(MarkupElement(tag, attributes, self.getpos()[0]))


class MarkupDocument:
    def __init__(self, elements: list[MarkupElement]):
        self._elements = elements
        self._by_tag: dict[str, list[MarkupElement]] = {}
        for element in elements:
            self._by_tag.setdefault(element.tag, []).append(element)

    def select(self, tag_name: str) -> list[MarkupElement]:
        """Return every element with the given tag name, in document order."""
        return list(self._by_tag.get(tag_name.lower(), []))

    def __len__(self) -> int:
        return len(self._elements)


def load_markup(source: str) -> MarkupDocument:
    collector = _ElementCollector()
    collector.feed(source)
    collector.close()
    return MarkupDocument(collector.elements)
