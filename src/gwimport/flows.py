"""Flow configuration schema.

A *flow* binds a path, a set of methods and an optional condition to a chain
of policies. Its configuration schema is shipped as package data and always
rendered the same way, so clients can cache or diff it.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any

FLOW_SCHEMA_RESOURCE = "flow.json"


@lru_cache(maxsize=1)
def _load_flow_schema() -> str:
    return resources.files("gwimport.schemas").joinpath(FLOW_SCHEMA_RESOURCE).read_text(
        encoding="utf-8"
    )


def get_flow_schema_object() -> dict[str, Any]:
    """Return the flow configuration schema as a fresh dict."""
    return json.loads(_load_flow_schema())


def get_flow_schema() -> str:
    """Return the flow configuration JSON Schema as text.

    Keys keep their declaration order, nesting is indented by two spaces
    and the text ends with a newline.
    """
    return json.dumps(get_flow_schema_object(), indent=2) + "\n"
