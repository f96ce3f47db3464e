from typing import Any


def default_key(value: Any) -> int:
    """Derive an integer key from an arbitrary value.

    ``None`` maps to 0, anything else to its ``hash()``. Callers supplying
    their own key function must make it deterministic: two values that
    should share an entry have to produce the same key, otherwise the tree
    stores them as separate entries instead of updating one.
    """
    if value is None:
        return 0
    return hash(value)
