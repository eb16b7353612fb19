"""JSON serialisation of report data."""

from __future__ import annotations

import json
from typing import Any

from ..models import descriptor_to_dict


def dump_json(data: Any) -> str:
    """Pretty-print report data; slashes and non-ASCII text stay unescaped."""
    return json.dumps(descriptor_to_dict(data), indent=2, ensure_ascii=False) + "\n"


__all__ = ["dump_json"]
