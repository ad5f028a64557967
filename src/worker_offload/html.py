"""Minimal HTML tag processor — find start tags, read and rewrite attributes.

Walks an HTML fragment one start tag at a time. Edits are recorded as
spans against the original string and applied by ``get_updated_html()``,
so every byte outside an edited attribute comes back exactly as it went
in: quoting style, attribute order, whitespace, comments, and the bodies
of raw-text elements.

Usage::

    p = TagProcessor('<script id="gtag-js" src="/g.js"></script>')
    while p.next_tag("script"):
        if p.get_attribute("id") == "gtag-js":
            p.set_attribute("type", "text/partytown")
            break
    p.get_updated_html()
    # '<script type="text/partytown" id="gtag-js" src="/g.js"></script>'

Not a parser: there is no tree, no implied tags, and no error recovery
beyond stopping at the first unterminated construct.
"""

import html
import re
from dataclasses import dataclass, field

_TAG_OPEN = re.compile(r"<(!--|[!?/]|[A-Za-z][^\s/>]*)")
_ATTRIBUTE = re.compile(
    r"""([^\s"'>/=][^\s"'>/=]*)"""
    r"""(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)

# Elements whose contents are text, not markup
RAW_TEXT_ELEMENTS = frozenset({"script", "style", "textarea", "title"})


@dataclass(slots=True)
class _Attribute:
    value: str | bool
    start: int
    end: int


@dataclass(slots=True)
class _Tag:
    name: str
    name_end: int
    end: int
    attributes: dict[str, _Attribute] = field(default_factory=dict)


class TagProcessor:
    """Scan an HTML string tag by tag and edit attributes in place."""

    __slots__ = ("_cursor", "_edits", "_html", "_tag")

    def __init__(self, html_text: str) -> None:
        self._html = html_text
        self._cursor = 0
        self._tag: _Tag | None = None
        # (start, end, attribute) of the original span -> replacement text
        self._edits: dict[tuple[int, int, str], str] = {}

    @property
    def tag_name(self) -> str | None:
        """Lowercased name of the current tag, ``None`` before the first match."""
        return self._tag.name if self._tag else None

    def next_tag(self, tag_name: str | None = None) -> bool:
        """Advance to the next start tag, optionally only tags named *tag_name*.

        Returns ``False`` once the input is exhausted (or an unterminated
        tag or comment is reached).
        """
        wanted = tag_name.lower() if tag_name else None
        text = self._html
        pos = self._cursor
        while True:
            m = _TAG_OPEN.search(text, pos)
            if m is None:
                return self._stop()
            token = m.group(1)
            if token == "!--":
                close = text.find("-->", m.end())
                if close == -1:
                    return self._stop()
                pos = close + 3
                continue
            if token in ("!", "?", "/"):
                # Doctype, processing instruction, or end tag
                close = text.find(">", m.end())
                if close == -1:
                    return self._stop()
                pos = close + 1
                continue

            tag = self._parse_start_tag(token.lower(), m.end())
            if tag is None:
                return self._stop()
            pos = tag.end
            if tag.name in RAW_TEXT_ELEMENTS:
                pos = self._skip_raw_text(tag.name, pos)
            if wanted is not None and tag.name != wanted:
                continue
            self._cursor = pos
            self._tag = tag
            return True

    def get_attribute(self, name: str) -> str | bool | None:
        """Value of attribute *name* on the current tag.

        ``None`` when absent, ``True`` for a bare boolean attribute,
        otherwise the entity-decoded string.
        """
        if self._tag is None:
            return None
        attr = self._tag.attributes.get(name.lower())
        return attr.value if attr else None

    def set_attribute(self, name: str, value: str | bool) -> bool:
        """Set attribute *name* on the current tag.

        Replaces an existing attribute's markup or inserts a new attribute
        directly after the tag name. ``True`` writes a bare attribute.
        Returns ``False`` when there is no current tag.
        """
        tag = self._tag
        if tag is None:
            return False
        key = name.lower()
        if value is True:
            markup = key
        else:
            markup = f'{key}="{html.escape(str(value), quote=True)}"'

        attr = tag.attributes.get(key)
        if attr is None:
            attr = _Attribute(value, tag.name_end, tag.name_end)
            tag.attributes[key] = attr
        if attr.start == attr.end:
            markup = " " + markup
        self._edits[(attr.start, attr.end, key)] = markup
        attr.value = value
        return True

    def get_updated_html(self) -> str:
        """The input with all recorded edits applied."""
        if not self._edits:
            return self._html
        parts: list[str] = []
        last = 0
        for (start, end, _), markup in sorted(self._edits.items()):
            parts.append(self._html[last:start])
            parts.append(markup)
            last = end
        parts.append(self._html[last:])
        return "".join(parts)

    # -- Internals --

    def _stop(self) -> bool:
        self._cursor = len(self._html)
        self._tag = None
        return False

    def _parse_start_tag(self, name: str, pos: int) -> _Tag | None:
        text = self._html
        size = len(text)
        tag = _Tag(name=name, name_end=pos, end=pos)
        while True:
            while pos < size and (text[pos].isspace() or text[pos] == "/"):
                pos += 1
            if pos >= size:
                return None
            if text[pos] == ">":
                tag.end = pos + 1
                return tag
            am = _ATTRIBUTE.match(text, pos)
            if am is None:
                pos += 1
                continue
            key = am.group(1).lower()
            if key not in tag.attributes:
                if am.group(2) is not None:
                    raw: str | None = am.group(2)
                elif am.group(3) is not None:
                    raw = am.group(3)
                else:
                    raw = am.group(4)
                value: str | bool = True if raw is None else html.unescape(raw)
                tag.attributes[key] = _Attribute(value, am.start(), am.end())
            pos = am.end()

    def _skip_raw_text(self, name: str, pos: int) -> int:
        close = re.compile(rf"</{name}[\s/>]", re.IGNORECASE).search(self._html, pos)
        if close is None:
            return len(self._html)
        return close.start()
