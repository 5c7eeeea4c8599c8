"""
Display formatter for execution data values, registered as the ``display``
template filter.

Execution data from the host nests objects (job, user, node lists). When a
value is a dict we try to pull out a human-readable name instead of dumping
the raw repr.

Priority order for display-name extraction:
  name > fullName > full_name > title > label > id > href > url
"""

import json
from typing import Any

# Keys we look for (in priority order) when extracting a display name from a dict.
DISPLAY_KEYS = (
    "name",
    "fullName",
    "full_name",
    "title",
    "label",
    "id",
    "href",
    "url",
)


def format_value(val: Any, max_len: int = 300) -> str:
    """
    Format a single value into a human-readable string.

    - ``None`` becomes an empty string, primitives go through ``str(val)``.
    - Lists of primitives are joined with ", ".
    - Dicts are inspected for well-known display keys; if found we return that.
    - Otherwise we return compact JSON, truncated to *max_len* chars.
    """
    if val is None:
        return ""

    if not isinstance(val, (dict, list, tuple)):
        return str(val)

    if isinstance(val, (list, tuple)):
        if len(val) == 0:
            return "(none)"
        if all(not isinstance(v, (dict, list, tuple)) for v in val):
            joined = ", ".join(str(v) for v in val)
        else:
            joined = ", ".join(format_value(v, 80) for v in val)
        return f"{joined[:max_len]}..." if len(joined) > max_len else joined

    for key in DISPLAY_KEYS:
        if key in val and val[key] is not None and not isinstance(val[key], (dict, list)):
            return str(val[key])

    try:
        dumped = json.dumps(val, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return "[complex value]"
    return f"{dumped[:max_len]}..." if len(dumped) > max_len else dumped
