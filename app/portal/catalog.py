from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.portal.records import RecordSnapshot

logger = logging.getLogger(__name__)


class CatalogConfigError(ValueError):
    """Raised when catalog records are authored with overlapping module URLs."""


@dataclass(frozen=True)
class CatalogModule:
    code: str
    module_id: int | None
    function_code: str
    name: str
    name_regional: str
    default_order: int
    url: str

    @property
    def is_implemented(self) -> bool:
        return self.url.strip() != ""


@dataclass(frozen=True)
class CatalogFunction:
    code: str
    name: str
    name_regional: str
    default_order: int
    url: str = ""
    modules: list[CatalogModule] = field(default_factory=list)


def _display_name(record: Mapping[str, Any], is_regional: bool) -> str:
    if is_regional and record.get("Name_Regional"):
        return record["Name_Regional"]
    return record.get("Name") or ""


def _order(record: Mapping[str, Any]) -> int:
    return record.get("Default_Order") or 0


def _modules_for_function(
    function_id: int,
    function_code: str,
    modules_details: Mapping[str, Any],
    is_regional: bool,
) -> list[CatalogModule]:
    modules: list[CatalogModule] = []
    for module_code, record in modules_details.items():
        if not isinstance(record, Mapping) or record.get("FunctionID") != function_id:
            continue
        modules.append(
            CatalogModule(
                code=module_code,
                module_id=record.get("ModuleID"),
                function_code=function_code,
                name=_display_name(record, is_regional),
                name_regional=record.get("Name_Regional") or "",
                default_order=_order(record),
                url=record.get("URL") or "",
            )
        )
    # sorted() is stable, so equal Default_Order keeps source order.
    return sorted(modules, key=lambda m: m.default_order)


def build_catalog(snapshot: RecordSnapshot) -> list[CatalogFunction]:
    """
    Build the Function -> Module navigation tree from a record snapshot.

    Always returns a fresh list. Missing function or module records (the normal
    state before login) give an empty catalog rather than an error.
    """
    functions_details = snapshot.functions_details
    modules_details = snapshot.modules_details
    if functions_details is None or modules_details is None:
        return []

    is_regional = snapshot.is_regional
    functions: list[CatalogFunction] = []
    for function_code, record in functions_details.items():
        if not isinstance(record, Mapping) or not record.get("FunctionID"):
            continue
        functions.append(
            CatalogFunction(
                code=function_code,
                name=_display_name(record, is_regional),
                name_regional=record.get("Name_Regional") or "",
                default_order=_order(record),
                url=record.get("URL") or "",
                modules=_modules_for_function(record["FunctionID"], function_code, modules_details, is_regional),
            )
        )
    return sorted(functions, key=lambda f: f.default_order)


def get_function_by_code(snapshot: RecordSnapshot, function_code: str) -> Mapping[str, Any] | None:
    if not snapshot.functions_details:
        return None
    return snapshot.functions_details.get(function_code)


def iter_modules(catalog: list[CatalogFunction]):
    for function in catalog:
        yield from function.modules


def find_url_overlaps(catalog: list[CatalogFunction]) -> list[tuple[CatalogModule, CatalogModule]]:
    """
    Pairs of implemented modules whose URLs are equal or nested (one is a path
    prefix of the other). With such pairs, URL resolution depends on catalog order.
    """
    from app.portal.resolver import url_matches

    implemented = [m for m in iter_modules(catalog) if m.is_implemented]
    overlaps: list[tuple[CatalogModule, CatalogModule]] = []
    for i, first in enumerate(implemented):
        for second in implemented[i + 1:]:
            if url_matches(first.url, second.url):
                overlaps.append((first, second))
    return overlaps


def validate_catalog(catalog: list[CatalogFunction], policy: str = "warn") -> list[tuple[CatalogModule, CatalogModule]]:
    """
    Report overlapping module URLs according to `policy`:
    "ignore" does nothing, "warn" logs each pair, "strict" raises CatalogConfigError.
    Resolution itself always keeps first-match-in-catalog-order.
    """
    if policy == "ignore":
        return []
    overlaps = find_url_overlaps(catalog)
    if not overlaps:
        return overlaps
    if policy == "strict":
        pairs = ", ".join(f"{a.code}({a.url}) ~ {b.code}({b.url})" for a, b in overlaps)
        raise CatalogConfigError(f"Overlapping module URLs: {pairs}")
    for a, b in overlaps:
        logger.warning(
            "Catalog URL overlap: module=%s url=%s and module=%s url=%s (first in catalog order wins)",
            a.code,
            a.url,
            b.code,
            b.url,
        )
    return overlaps
