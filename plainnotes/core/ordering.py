from __future__ import annotations

import re
import unicodedata

_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(name: str) -> tuple:
    """
    Sort key for display names: case-insensitive, digit runs compared by value.

    "item2" < "item10" < "Item11". The raw name is the last component so the
    order stays total for names differing only in case.
    """
    folded = unicodedata.normalize("NFKC", name).casefold()
    # re.split with a capture group alternates text / digits, text first,
    # so parts at the same index always compare like with like.
    parts = _DIGITS_RE.split(folded)
    key = tuple(int(p) if i % 2 else p for i, p in enumerate(parts))
    return key, name
