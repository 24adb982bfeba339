"""Small helpers shared by the registrar and the reporting layers."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

# "*" on its own, or an optional range operator followed by a trailing dotted version
_VERSION_RE = re.compile(r"(\*)$|(?:\^|~|[<>]=?)?((?:\d+\.){0,2}\d+)$")


def first_defined_property(props: Iterable[str]) -> Callable[[Mapping[str, Any]], Any]:
    """Return a lookup that picks the first of ``props`` present in a mapping.

    Properties are checked in the order given, not in the mapping's order, so
    ``first_defined_property(["version", "_release"])`` always prefers ``version``.
    Keys holding ``None`` count as absent. The lookup returns ``None`` when no
    property matches.
    """
    props = tuple(props)

    def lookup(obj: Mapping[str, Any]) -> Any:
        for prop in props:
            value = obj.get(prop)
            if value is not None:
                return value
        return None

    return lookup


def prune_version_string(version: str) -> str:
    """Strip a leading range operator from a version identifier.

    ``"^1.2.3"`` becomes ``"1.2.3"``, ``"~2.0"`` becomes ``"2.0"`` and ``"*"`` is
    kept as is. Strings without a trailing numeric version (tags, URLs) are
    returned unchanged.
    """
    m = _VERSION_RE.search(version.strip())
    if not m:
        return version
    return m.group(1) or m.group(2)
