from typing import Any, Mapping, Optional


def combine_paths(*paths: Optional[str]) -> str:
    """Joins url fragments with a single '/', skipping empty parts."""
    parts = []
    for path in paths:
        if not path:
            continue
        parts.append(path.strip('/'))
    return '/'.join(part for part in parts if part)


def extend(target: Mapping[str, Any], source: Optional[Mapping[str, Any]]) -> dict:
    """Returns a shallow copy of target with the keys of source layered on top.

    Keys present in both take the value from source.
    """
    result = dict(target)
    if source:
        result.update(source)
    return result
