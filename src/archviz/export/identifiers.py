"""Identifier sanitization for diagram text."""

import re

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")


def sanitize_identifier(raw: str) -> str:
    """Replace characters outside [A-Za-z0-9_] with '_' and guard a leading digit."""
    safe = _INVALID_CHARS.sub("_", raw)
    if not safe:
        return "_"
    if safe[0].isdigit():
        safe = f"_{safe}"
    return safe


class IdentifierRegistry:
    """Assigns each key a sanitized identifier that is unique within one export.

    Keys that sanitize to an identifier already handed out get a numeric
    suffix (``a_b``, ``a_b_2``, ...). Assignment order decides who keeps the
    bare form, so callers register keys in a deterministic order.
    """

    def __init__(self):
        self._assigned: dict[str, str] = {}
        self._used: set[str] = set()

    def __contains__(self, key: str) -> bool:
        return key in self._assigned

    def identifier(self, key: str, base: str | None = None) -> str:
        """Identifier for ``key``, allocating one on first use."""
        if key in self._assigned:
            return self._assigned[key]

        base = sanitize_identifier(base if base is not None else key)
        candidate = base
        suffix = 2
        while candidate in self._used:
            candidate = f"{base}_{suffix}"
            suffix += 1

        self._assigned[key] = candidate
        self._used.add(candidate)
        return candidate

    def derived(self, key: str, suffix: str) -> str:
        """Unique identifier for an auxiliary element belonging to ``key`` (e.g. a note)."""
        return self.identifier(f"{key}\x00{suffix}", base=f"{self.identifier(key)}_{suffix}")
