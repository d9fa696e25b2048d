"""Prometheus metrics definitions for Julienned."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "julienned_http_requests_total",
    "Total number of HTTP requests processed by the Julienned API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "julienned_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Julienned API",
    ["method", "path"],
)

SHOPPING_LISTS_GENERATED = Counter(
    "julienned_shopping_lists_generated_total",
    "Number of shopping lists generated from meal plans",
)

RECIPE_FETCH_FAILURES = Counter(
    "julienned_recipe_fetch_failures_total",
    "Recipes referenced by meal plans that could not be loaded",
    ["reason"],
)

SHOPPING_LIST_MUTATIONS = Counter(
    "julienned_shopping_list_mutations_total",
    "Shopping list record mutations by operation",
    ["operation"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SHOPPING_LISTS_GENERATED",
    "RECIPE_FETCH_FAILURES",
    "SHOPPING_LIST_MUTATIONS",
]
