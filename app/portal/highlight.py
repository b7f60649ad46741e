"""
Deep-link highlight on the landing dashboard.

The dashboard receives a module URL (from a breadcrumb click), resolves it
against the categories it renders, scrolls the matching card into view below
the fixed header and highlights it for a short window.

States: idle -> awaiting_render -> highlighted -> idle.
There are no timers: the view signals readiness with `view_ready()`, expiry is a
deadline checked against an injected clock, and `dispose()` ends the
controller's lifetime so late calls never touch a torn-down view.

On the server only `request()` runs: the dashboard route resolves the deep link
and hands the module code to the page. The remaining methods model the
client-side lifecycle (scroll offset, highlight window, teardown) that the
dashboard template script performs in the browser, with the same clearance and
duration settings.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping

from app.portal.catalog import CatalogFunction, CatalogModule
from app.portal.constants import DEFAULT_HEADER_CLEARANCE_PX, DEFAULT_HIGHLIGHT_DURATION_MS
from app.portal.resolver import normalize_url, resolve_module_by_url

logger = logging.getLogger(__name__)

IDLE = "idle"
AWAITING_RENDER = "awaiting_render"
HIGHLIGHTED = "highlighted"


class HighlightController:
    def __init__(
        self,
        catalog: list[CatalogFunction],
        *,
        clock: Callable[[], float] = time.monotonic,
        duration_ms: int = DEFAULT_HIGHLIGHT_DURATION_MS,
        header_clearance: int = DEFAULT_HEADER_CLEARANCE_PX,
    ) -> None:
        self.catalog = catalog
        self.clock = clock
        self.duration = duration_ms / 1000.0
        self.header_clearance = header_clearance

        self.state = IDLE
        self.pending: CatalogModule | None = None
        self.highlighted: CatalogModule | None = None
        self._requested_url: str | None = None
        self._deadline: float | None = None
        self._alive = True

    def request(self, url: str | None) -> CatalogModule | None:
        """Resolve a deep link. Repeating the same request is a no-op."""
        if not self._alive:
            return None
        normalized = normalize_url(url)
        if self.state == AWAITING_RENDER and normalized == self._requested_url:
            return self.pending

        module = resolve_module_by_url(self.catalog, url)
        if module is None:
            logger.debug("Deep link %r did not resolve to a module", url)
            self._reset()
            return None
        self.state = AWAITING_RENDER
        self.pending = module
        self._requested_url = normalized
        return module

    def view_ready(self, card_offsets: Mapping[str, int]) -> int | None:
        """
        Called once the cards are rendered, with each card's vertical offset by
        module code. Returns the scroll offset for the pending module, or None
        when nothing is pending or its card is not on the page.
        """
        if not self._alive or self.state != AWAITING_RENDER or self.pending is None:
            return None
        module = self.pending
        offset = card_offsets.get(module.code)
        if offset is None:
            # Card not rendered (e.g. filtered out).
            self._reset()
            return None

        self.state = HIGHLIGHTED
        self.highlighted = module
        self.pending = None
        self._deadline = self.clock() + self.duration
        return max(offset - self.header_clearance, 0)

    def tick(self) -> str:
        """Expire the highlight once its window has passed. Returns the state."""
        if self._alive and self.state == HIGHLIGHTED and self._deadline is not None:
            if self.clock() >= self._deadline:
                self._reset()
        return self.state

    def is_highlighted(self, module_code: str) -> bool:
        self.tick()
        return self.state == HIGHLIGHTED and self.highlighted is not None and self.highlighted.code == module_code

    def dispose(self) -> None:
        self._reset()
        self._alive = False

    @property
    def alive(self) -> bool:
        return self._alive

    def _reset(self) -> None:
        self.state = IDLE
        self.pending = None
        self.highlighted = None
        self._requested_url = None
        self._deadline = None


def dashboard_categories(catalog: list[CatalogFunction], search: str = "") -> list[CatalogFunction]:
    """
    Categories shown on the dashboard: functions with at least one implemented
    module, optionally filtered by a case-insensitive module name search.
    """
    needle = search.strip().lower()
    categories: list[CatalogFunction] = []
    for function in catalog:
        modules = [m for m in function.modules if m.is_implemented]
        if needle:
            modules = [m for m in modules if needle in m.name.lower()]
        if modules:
            categories.append(
                CatalogFunction(
                    code=function.code,
                    name=function.name,
                    name_regional=function.name_regional,
                    default_order=function.default_order,
                    url=function.url,
                    modules=modules,
                )
            )
    return categories
