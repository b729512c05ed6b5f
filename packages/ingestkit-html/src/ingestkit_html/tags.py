"""Tag-name normalization used as the handler dispatch key."""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def normalize_tag_name(raw_name: str) -> str:
    """Return the canonical lookup key for a raw element tag name.

    Every character outside ``[A-Za-z0-9]`` is removed and the remainder
    lowercased, so ``"TR"``, ``"t-r"`` and ``"tr "`` all map to ``"tr"``.
    Input with no ASCII alphanumerics yields ``""``, which matches no
    registered handler.
    """
    return _NON_ALNUM.sub("", raw_name).lower()
