"""Forward-only pull cursor over a streamed XML report.

The report is fed chunk by chunk into a defused expat SAX parser. Start, end
and character events are queued as the parser produces them and handed out
on demand, so arbitrarily large reports are never loaded as a whole while
every element still knows the source line its start tag is on.

Typical use walks the two levels of the report grammar::

    reader = ReportReader(stream)
    root = reader.root()
    for file_elem in reader.children(root):
        for child in reader.children(file_elem):
            ...

Children that the consumer does not descend into are skipped automatically.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
from xml.sax import SAXParseException
from xml.sax.expatreader import ExpatLocator
from xml.sax.handler import ContentHandler

from defusedxml import DefusedXmlException
from defusedxml.sax import make_parser

from gencov.parsing.errors import MalformedDocumentError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from typing import BinaryIO
    from xml.sax.xmlreader import AttributesImpl


_DEFAULT_CHUNK_SIZE = 64 * 1024


class _EventKind(Enum):
    START = "start"
    END = "end"
    TEXT = "text"


@dataclass(frozen=True)
class _Event:
    kind: _EventKind
    value: str
    line: int = 0
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Element:
    """Start tag of an XML element as seen by the cursor."""

    name: str
    """Element name (no namespace processing)."""

    attributes: Mapping[str, str]
    """Attribute values by name."""

    line: int
    """1-based line of the start tag in the report."""

    depth: int
    """Nesting level; the document root has depth 1."""

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of attribute *key*, or *default* when absent."""
        return self.attributes.get(key, default)


class _EventCollector(ContentHandler):
    """SAX handler that only queues events for the cursor."""

    def __init__(self, events: deque[_Event]) -> None:
        super().__init__()
        self._events = events

    def _line(self) -> int:
        if self._locator is None:
            return 0
        return int(self._locator.getLineNumber() or 0)

    def startElement(self, name: str, attrs: AttributesImpl) -> None:  # noqa: N802
        self._events.append(
            _Event(_EventKind.START, name, self._line(), dict(attrs.items()))
        )

    def endElement(self, name: str) -> None:  # noqa: N802
        self._events.append(_Event(_EventKind.END, name, self._line()))

    def characters(self, content: str) -> None:
        self._events.append(_Event(_EventKind.TEXT, content))


class ReportReader:
    """Single-pass cursor over the elements of an XML byte stream.

    Raises ``MalformedDocumentError`` when the cursor reaches the point where
    the stream stops being well-formed XML (or uses a construct refused by
    defusedxml). Elements before that point are still delivered.
    """

    def __init__(self, stream: BinaryIO, *, chunk_size: int = _DEFAULT_CHUNK_SIZE) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._events: deque[_Event] = deque()
        self._parser: Any = make_parser()
        collector = _EventCollector(self._events)
        # feed() never installs a locator, only parse() does.
        collector.setDocumentLocator(ExpatLocator(self._parser))
        self._parser.setContentHandler(collector)
        self._finished = False
        self._error: MalformedDocumentError | None = None
        self._depth = 0

    def root(self) -> Element | None:
        """Advance to the document root and return it (``None`` on empty input)."""
        while (event := self._next_event()) is not None:
            if event.kind is _EventKind.START:
                return self._element(event)
        return None

    def children(self, parent: Element | None = None) -> Iterator[Element]:
        """Yield the direct child elements of *parent* in document order.

        Must be called while the cursor sits on *parent*, i.e. right after it
        was returned. Descendants of a yielded child that the caller leaves
        unread are skipped before the next child is produced.
        """
        level = parent.depth if parent is not None else 0
        while True:
            self._skip_to(level)
            if self._depth < level:
                return
            event = self._next_event()
            if event is None or event.kind is _EventKind.END:
                return
            if event.kind is _EventKind.START:
                yield self._element(event)

    def text(self, element: Element) -> str:
        """Consume *element* and return the character data of all its descendants."""
        parts: list[str] = []
        while self._depth >= element.depth:
            event = self._next_event()
            if event is None:
                break
            if event.kind is _EventKind.TEXT:
                parts.append(event.value)
        return "".join(parts)

    def _element(self, event: _Event) -> Element:
        return Element(
            name=event.value,
            attributes=event.attributes,
            line=event.line,
            depth=self._depth,
        )

    def _skip_to(self, level: int) -> None:
        while self._depth > level:
            if self._next_event() is None:
                return

    def _next_event(self) -> _Event | None:
        while not self._events:
            if self._error is not None:
                raise self._error
            if self._finished:
                return None
            self._feed()
        event = self._events.popleft()
        if event.kind is _EventKind.START:
            self._depth += 1
        elif event.kind is _EventKind.END:
            self._depth -= 1
        return event

    def _feed(self) -> None:
        chunk = self._stream.read(self._chunk_size)
        try:
            if chunk:
                self._parser.feed(chunk)
            else:
                self._finished = True
                self._parser.feed(b"", isFinal=True)
        except SAXParseException as e:
            self._fail(
                MalformedDocumentError(
                    f"Invalid XML: {e.getMessage()}", line_number=e.getLineNumber()
                ),
                e,
            )
        except DefusedXmlException as e:
            self._fail(MalformedDocumentError(f"Forbidden XML construct: {e}"), e)

    def _fail(self, error: MalformedDocumentError, cause: Exception) -> None:
        # Events queued before the failure are still handed out first.
        error.__cause__ = cause
        self._error = error
        self._finished = True
