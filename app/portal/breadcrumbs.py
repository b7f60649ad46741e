from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from flask import Flask
from werkzeug.exceptions import HTTPException

from app.portal.catalog import CatalogFunction
from app.portal.constants import DEEP_LINK_PARAM
from app.portal.resolver import resolve_module_by_url


@dataclass(frozen=True)
class Breadcrumb:
    label: str
    url: str


@dataclass
class RouteNode:
    """One level of the matched route: its own path segments plus route data."""

    segments: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    parent: "RouteNode | None" = field(default=None, repr=False, compare=False)
    first_child: "RouteNode | None" = None

    def add_child(self, segments: list[str], data: dict[str, Any] | None = None) -> "RouteNode":
        child = RouteNode(segments=list(segments), data=dict(data or {}), parent=self)
        self.first_child = child
        return child


def breadcrumb(label: str | Callable[..., str]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Attach a breadcrumb label to a view. `label` may be a callable taking the
    view's URL arguments and returning the label.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        fn.breadcrumb = label  # type: ignore[attr-defined]
        return fn

    return decorator


def build_trail(root: RouteNode) -> list[Breadcrumb]:
    trail: list[Breadcrumb] = []
    segments: list[str] = []
    node: RouteNode | None = root
    while node is not None:
        segments = segments + node.segments
        label = node.data.get("breadcrumb")
        parent_label = node.parent.data.get("breadcrumb") if node.parent else None
        if label and label != parent_label:
            trail.append(Breadcrumb(label=label, url="/" + "/".join(segments)))
        node = node.first_child
    return trail


def _label_for(app: Flask, path: str) -> str | None:
    adapter = app.url_map.bind("localhost")
    try:
        endpoint, view_args = adapter.match(path, method="GET")
    except HTTPException:
        # No view (or only a redirect) at this prefix.
        return None
    view = app.view_functions.get(endpoint)
    label = getattr(view, "breadcrumb", None)
    if callable(label):
        return label(**view_args)
    return label


def route_tree_for_path(app: Flask, path: str) -> RouteNode:
    """
    Build the route-state tree for `path`: an unlabeled root, then one node per
    path segment labeled by the view that handles that prefix.
    """
    root = RouteNode()
    node = root
    walked: list[str] = []
    for segment in [s for s in path.split("/") if s]:
        walked.append(segment)
        label = _label_for(app, "/" + "/".join(walked))
        node = node.add_child([segment], {"breadcrumb": label} if label else None)
    return root


def is_breadcrumb_disabled(index: int) -> bool:
    """Second and third trail entries render as plain text."""
    return index in (1, 2)


def is_local_path(url: str | None) -> bool:
    url = (url or "").strip()
    return url.startswith("/") and not url.startswith("//") and "\\" not in url


def breadcrumb_target(catalog: list[CatalogFunction], url: str, dashboard_url: str = "/") -> str:
    """
    Where a click on a trail entry should go: the dashboard with a deep-link
    marker when `url` resolves to a catalog module, else the literal `url`.
    """
    if resolve_module_by_url(catalog, url) is not None:
        return f"{dashboard_url}?{urlencode({DEEP_LINK_PARAM: url})}"
    return url
