"""Template directives: pure functions behind the site's template helpers.

Each directive turns plain values (and, for the block directives, a
per-item renderer) into a string. No state, no I/O: the kida binding in
``masthead.templating.integration`` adds Markup wrapping and partial
lookup on top.

Block directives skip holes. A ``None`` at an index, or an index past
the end of the sequence, renders nothing and raises nothing.
"""

import math
import re
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

BlockRenderer = Callable[[Any], str]

BLOCK_BOUNDARY = "</p>"
ELLIPSIS = "..."
PLACEHOLDER_IMAGE = "https://via.placeholder.com/350?text=Image not found"

CAROUSEL_OPEN = '<div class="carousel-inner" role="listbox">'
CAROUSEL_CLOSE = "</div>"
SLIDE_OPEN = '<div class="carousel-item">'
ACTIVE_SLIDE_OPEN = '<div class="carousel-item active">'
SLIDE_CLOSE = "</div>"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def truncate_to_first_block(content: str | None) -> str:
    """Cut *content* at its first closing paragraph and append an ellipsis.

    Content without a ``</p>`` comes back unchanged.

    Example:
        {{ post.content | blurb }}
        "<p>One</p><p>Two</p>" → "<p>One..."
    """
    if not content:
        return ""
    index = content.find(BLOCK_BOUNDARY)
    if index < 0:
        return content
    return content[:index] + ELLIPSIS


def carousel(items: Sequence[T], block: Callable[[T], str]) -> str:
    """Wrap every item in a carousel slide; only the first slide is active."""
    parts = [CAROUSEL_OPEN]
    for index, item in enumerate(items):
        parts.append(ACTIVE_SLIDE_OPEN if index == 0 else SLIDE_OPEN)
        parts.append(block(item))
        parts.append(SLIDE_CLOSE)
    parts.append(CAROUSEL_CLOSE)
    return "".join(parts)


def _render_range(items: Sequence[T], indices: range, block: Callable[[T], str]) -> str:
    out: list[str] = []
    for index in indices:
        if 0 <= index < len(items) and items[index] is not None:
            out.append(block(items[index]))
    return "".join(out)


def _as_int(value: Any) -> int | None:
    """Coerce a template parameter (often a string) to an int.

    Numeric strings parse whole (``"2.5"`` → 2, ``"1e3"`` → 1000);
    otherwise a leading integer is used (``"3px"`` → 3).
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    text = str(value)
    try:
        number = float(text.strip())
    except ValueError:
        prefix = _LEADING_INT.match(text)
        return int(prefix.group(1)) if prefix else None
    if not math.isfinite(number):
        return None
    return int(number)


def first_n(items: Sequence[T], n: int | str, block: Callable[[T], str]) -> str:
    """Render the items at indices ``0 .. n-1`` that exist.

    Asking for more items than the sequence holds is fine.
    """
    count = _as_int(n)
    if count is None:
        return ""
    return _render_range(items, range(min(count, len(items))), block)


def window(
    items: Sequence[T],
    start: int | str,
    n: int | str,
    block: Callable[[T], str],
) -> str:
    """Render the items at indices ``start .. min(len, start+n) - 1`` that exist.

    *start* and *n* usually arrive from templates as strings. They are
    coerced to integers before the upper bound is computed, so
    ``window(items, "2", "3", ...)`` covers indices 2, 3 and 4.
    A parameter with no leading integer renders nothing.
    """
    first = _as_int(start)
    count = _as_int(n)
    if first is None or count is None:
        return ""
    return _render_range(items, range(max(first, 0), min(len(items), first + count)), block)


def checked_if(test: Any) -> str:
    """``"checked"`` when *test* is truthy, else ``""``."""
    return "checked" if test else ""


def selected_if(test: Any) -> str:
    """``"selected"`` when *test* is truthy, else ``""``."""
    return "selected" if test else ""


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            return float(stripped)
        except ValueError:
            return None
    return None


def loose_equal(a: Any, b: Any) -> bool:
    """Compare two form values the way a browser-side ``==`` would.

    Numbers and numeric strings compare by value (``1 == "1"``), booleans
    count as 0 and 1, ``None`` only equals ``None``.
    """
    if a is None or b is None:
        return a is None and b is None
    if a == b:
        return True
    if isinstance(a, str) and isinstance(b, str):
        return False
    left, right = _as_number(a), _as_number(b)
    return left is not None and right is not None and left == right


def equal_selected(a: Any, b: Any) -> str:
    """``"selected"`` when *a* and *b* are loosely equal, else ``""``.

    Example:
        <option value="2" {{ post.category | equal_selected(2) }}>
    """
    return "selected" if loose_equal(a, b) else ""


def image_or_placeholder(url: str | None, placeholder: str = PLACEHOLDER_IMAGE) -> str:
    """Return *url*, or the placeholder image when it is empty."""
    return url if url else placeholder
