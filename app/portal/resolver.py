"""
URL -> catalog module resolution.

This is the single normalize-and-match routine used by the breadcrumb trail, the
dashboard deep link and the highlight controller.
"""
from __future__ import annotations

from app.portal.catalog import CatalogFunction, CatalogModule, build_catalog
from app.portal.records import RecordSnapshot


def normalize_url(url: str | None) -> str:
    """Trim whitespace, then strip leading and trailing slashes."""
    return (url or "").strip().strip("/")


def url_matches(candidate: str, target: str) -> bool:
    """
    Exact match, or either URL is a path prefix of the other.
    The appended "/" keeps "entities" from matching "entities-archive".
    """
    candidate = normalize_url(candidate)
    target = normalize_url(target)
    if candidate == target:
        return True
    return target.startswith(candidate + "/") or candidate.startswith(target + "/")


def resolve_module_by_url(catalog: list[CatalogFunction], url: str | None) -> CatalogModule | None:
    """
    First module, in catalog order, whose URL matches `url`. Modules without a
    URL are never matched. Returns None for a blank `url` or when nothing matches.
    """
    target = normalize_url(url)
    if not target:
        return None

    for function in catalog:
        for module in function.modules:
            if not module.is_implemented:
                continue
            if url_matches(module.url, target):
                return module
    return None


def find_module_by_url(snapshot: RecordSnapshot, url: str | None) -> CatalogModule | None:
    """Resolve against a catalog freshly built from `snapshot`."""
    if not normalize_url(url):
        return None
    return resolve_module_by_url(build_catalog(snapshot), url)
