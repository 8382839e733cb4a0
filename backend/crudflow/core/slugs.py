"""Alpha-dash slugs — route-safe identifiers made of [a-zA-Z0-9-].

Invariants:
    - to_alpha_dash output always satisfies is_alpha_dash (or is empty)
    - Conversion is idempotent
"""

import re

_NOT_ALPHA_DASH = re.compile(r"[^a-zA-Z0-9\-]")


def to_alpha_dash(text: str) -> str:
    """Trim, lowercase, spaces → dashes, then drop everything else outside the set."""
    text = text.strip().lower().replace(" ", "-")
    return _NOT_ALPHA_DASH.sub("", text)


def is_alpha_dash(text: str) -> bool:
    return bool(text) and _NOT_ALPHA_DASH.search(text) is None
