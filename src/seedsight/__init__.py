"""
SeedSight - Ranked speedrun match analytics

Classifies match outcomes for a viewpoint player, decodes seed variation tags,
filters match lists, segments run timelines into phases and aggregates
everything into summary counts and chart-ready series.

Usage:
    from seedsight import Match, FilterSpec, apply_filters, compute_overview

    matches = [Match.from_dict(raw) for raw in payload["data"]]
    ranked = apply_filters(matches, FilterSpec(types={2}))
    print(compute_overview(ranked, "someplayer").win_rate)
"""

__version__ = "0.1.0"
__author__ = "SeedSight Contributors"


def __getattr__(name):
    """Lazy import for the public API."""
    if name in ("Match", "Seed", "Player", "TimelineEvent", "parse_matches"):
        from seedsight.core import schemas

        return getattr(schemas, name)
    elif name in ("parse_variations", "VariationCategories"):
        from seedsight.analysis import variations

        return getattr(variations, name)
    elif name in ("classify", "resolve_viewpoint", "Outcome"):
        from seedsight.analysis import outcome

        return getattr(outcome, name)
    elif name in ("FilterSpec", "apply_filters"):
        from seedsight.analysis import filters

        return getattr(filters, name)
    elif name in ("segment_timelines",):
        from seedsight.analysis import timeline

        return getattr(timeline, name)
    elif name in ("compute_overview", "breakdown_by_key", "time_series"):
        from seedsight.analysis import aggregate

        return getattr(aggregate, name)
    elif name == "DetailCache":
        from seedsight.infra.cache import DetailCache

        return DetailCache
    elif name == "DetailFetchCoordinator":
        from seedsight.infra.fetcher import DetailFetchCoordinator

        return DetailFetchCoordinator
    raise AttributeError(f"module 'seedsight' has no attribute '{name}'")


__all__ = [
    "__version__",
    "Match",
    "Seed",
    "Player",
    "TimelineEvent",
    "parse_matches",
    "parse_variations",
    "VariationCategories",
    "classify",
    "resolve_viewpoint",
    "Outcome",
    "FilterSpec",
    "apply_filters",
    "segment_timelines",
    "compute_overview",
    "breakdown_by_key",
    "time_series",
    "DetailCache",
    "DetailFetchCoordinator",
]
