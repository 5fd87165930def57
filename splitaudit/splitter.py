"""Split one full audit request into single-dependency requests."""

import copy
from typing import Any


def split_request(request: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Produce one audit request per top-level dependency.

    Each output is a deep copy of ``request`` whose ``requires`` holds only
    that dependency, so concurrent submissions never share mutable state
    with each other or with the original.

    Args:
        request: Full audit request with a ``requires`` mapping

    Returns:
        Dict mapping dependency name to its single-dependency request
    """
    requires = request.get("requires") or {}
    singles = {}
    for dep, spec in requires.items():
        single = copy.deepcopy(request)
        single["requires"] = {dep: spec}
        singles[dep] = single
    return singles
