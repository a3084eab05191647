"""Deep merge used to layer configuration files.

Mappings merge key by key. Lists are replaced by default; an override list
whose first item is ``"+"`` appends its remaining items to the base list, and
``"="`` forces an explicit replacement.
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated with ``override`` without mutating either.

    Example:
        >>> deep_merge({"paths": {"frontend": "apps/web"}}, {"paths": {"contracts": "sc"}})
        {'paths': {'frontend': 'apps/web', 'contracts': 'sc'}}
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = merge_arrays(current, value)
        else:
            merged[key] = value
    return merged


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Combine two config lists.

    Example:
        >>> merge_arrays(["frontend-scaffold"], ["+", "next-scaffold"])
        ['frontend-scaffold', 'next-scaffold']
        >>> merge_arrays(["a"], ["=", "b"])
        ['b']
    """
    if not override:
        return list(override)
    marker = override[0]
    if marker == "+":
        return [*base, *override[1:]]
    if marker == "=":
        return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
