"""Package selection filters."""

from monorun.filters.resolver import (
    FilterMode,
    FilterResolver,
    build_dependency_graph,
    get_reachable,
    match_names,
    normalize_range,
    packages_owning,
    resolve_filter,
)

__all__ = [
    "FilterMode",
    "FilterResolver",
    "build_dependency_graph",
    "get_reachable",
    "match_names",
    "normalize_range",
    "packages_owning",
    "resolve_filter",
]
