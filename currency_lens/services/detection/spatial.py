"""Pointer position to currency amount.

The host (browser bridge, accessibility tree, test fake) supplies hit-testing
through :class:`SpatialQuery`; this module only decides which text to scan and
whether a match really sits under the pointer.

Strategies, tried in order:
    1. caret: the text node and offset under the pointer; scan a window around
       the offset and keep a match whose rendered box contains the point.
    2. element: the hovered element's own text (or its aria-label / title /
       data-* value) when the element is small and contains the point.
    3. ancestors: strategy 2 on up to 15 ancestors, compound widgets first.
       Frameworks such as number-flow split "$1,234" across nested nodes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol

from currency_lens.models.detection import DetectedAmount
from .detector import detect_currencies, detect_first

logger = logging.getLogger("currency_lens.detection.spatial")

CARET_WINDOW = 50
HIT_PADDING = 5.0
MAX_ANCESTOR_DEPTH = 15

MAX_TEXT_LENGTH = 50
MAX_COMPOUND_TEXT_LENGTH = 100
MAX_BOX = (150.0, 60.0)
MAX_COMPOUND_BOX = (200.0, 100.0)

SKIPPED_TAGS = frozenset(
    {"script", "style", "input", "textarea", "select", "body", "html", "head"}
)
BOUNDARY_TAGS = frozenset({"body", "html", "head"})
FALLBACK_ATTRIBUTES = ("aria-label", "title")
DATA_ATTRIBUTES = ("data-value", "data-amount", "data-price")


@dataclass(frozen=True)
class Box:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, x: float, y: float, padding: float = 0.0) -> bool:
        return (
            self.left - padding <= x <= self.right + padding
            and self.top - padding <= y <= self.bottom + padding
        )


@dataclass(frozen=True)
class CaretPosition:
    node: Any  # host text node
    offset: int


class SpatialQuery(Protocol):
    """Hit-testing primitives provided by the host.

    Nodes and elements are opaque to this module. ``caret_offset_at`` and
    ``bounding_box_of`` may raise ``NotImplementedError`` when the host has no
    caret API; the caret strategy then yields nothing.
    """

    def caret_offset_at(self, x: float, y: float) -> Optional[CaretPosition]: ...

    def bounding_box_of(self, node: Any, start: int, end: int) -> Optional[Box]: ...

    def element_at(self, x: float, y: float) -> Optional[Any]: ...

    def ancestors_of(self, element: Any) -> Iterable[Any]: ...

    def element_box(self, element: Any) -> Box: ...

    def tag_name(self, element: Any) -> str: ...

    def text_of(self, node: Any) -> Optional[str]: ...

    def inner_text_of(self, element: Any) -> Optional[str]: ...

    def attribute_of(self, element: Any, name: str) -> Optional[str]: ...


def is_compound_widget(tag_name: str) -> bool:
    """Custom elements (``number-flow-react``) always carry a hyphen."""
    return "-" in tag_name


class SpatialResolver:
    def __init__(self, query: SpatialQuery):
        self._query = query

    def resolve_at_point(
        self, element: Any, x: float, y: float
    ) -> Optional[DetectedAmount]:
        """Return the amount under ``(x, y)`` or None.

        ``element`` is the element the pointer event targeted; when None the
        host is asked for the element at the point.
        """
        result = self._from_caret(x, y)
        if result is not None:
            return result
        if element is None:
            element = self._query.element_at(x, y)
            if element is None:
                return None
        result = self._from_element(element, x, y)
        if result is not None:
            return result
        return self._from_ancestors(element, x, y)

    # Strategy 1 -------------------------------------------------
    def _from_caret(self, x: float, y: float) -> Optional[DetectedAmount]:
        try:
            caret = self._query.caret_offset_at(x, y)
            if caret is None:
                return None
            text = self._query.text_of(caret.node) or ""
            start = max(0, caret.offset - CARET_WINDOW)
            end = min(len(text), caret.offset + CARET_WINDOW)
            relative = caret.offset - start
            for found in detect_currencies(text[start:end]):
                if not found.start_index <= relative <= found.end_index:
                    continue
                absolute = found.shifted(start)
                box = self._query.bounding_box_of(
                    caret.node, absolute.start_index, absolute.end_index
                )
                # Reflowed text can put the caret next to, not on, the amount
                if box is not None and box.contains(x, y, HIT_PADDING):
                    return absolute
        except (NotImplementedError, ValueError) as e:
            logger.debug("caret lookup unavailable: %s", e)
        return None

    # Strategy 2 -------------------------------------------------
    def _element_text(self, element: Any, compound: bool) -> str:
        query = self._query
        text = (query.text_of(element) or "").strip()
        if not text and compound:
            text = (query.inner_text_of(element) or "").strip()
        for name in FALLBACK_ATTRIBUTES:
            if len(text) >= 2:
                return text
            value = query.attribute_of(element, name)
            if value:
                text = value.strip()
        if len(text) < 2:
            for name in DATA_ATTRIBUTES:
                value = query.attribute_of(element, name)
                if value:
                    return value.strip()
        return text

    def _from_element(self, element: Any, x: float, y: float) -> Optional[DetectedAmount]:
        tag = self._tag(element)
        if tag in SKIPPED_TAGS:
            return None
        compound = is_compound_widget(tag)

        text = self._element_text(element, compound)
        max_length = MAX_COMPOUND_TEXT_LENGTH if compound else MAX_TEXT_LENGTH
        if not 1 <= len(text) <= max_length:
            return None

        box = self._query.element_box(element)
        max_width, max_height = MAX_COMPOUND_BOX if compound else MAX_BOX
        # Large containers hold paragraphs, not a single price
        if box.width > max_width or box.height > max_height:
            return None
        if not box.contains(x, y, HIT_PADDING):
            return None
        return detect_first(text)

    # Strategy 3 -------------------------------------------------
    def _tag(self, element: Any) -> str:
        return (self._query.tag_name(element) or "").lower()

    def _ancestor_chain(self, element: Any) -> List[Any]:
        chain: List[Any] = []
        for ancestor in self._query.ancestors_of(element):
            if len(chain) >= MAX_ANCESTOR_DEPTH:
                break
            if self._tag(ancestor) in BOUNDARY_TAGS:
                break
            chain.append(ancestor)
        return chain

    def _from_ancestors(self, element: Any, x: float, y: float) -> Optional[DetectedAmount]:
        compound: List[Any] = []
        plain: List[Any] = []
        for ancestor in self._ancestor_chain(element):
            (compound if is_compound_widget(self._tag(ancestor)) else plain).append(ancestor)
        for ancestor in compound + plain:
            result = self._from_element(ancestor, x, y)
            if result is not None:
                return result
        return None


def scan_element(query: SpatialQuery, element: Any) -> List[DetectedAmount]:
    """Detect every amount in an element's full text content."""
    return detect_currencies(query.text_of(element) or "")
