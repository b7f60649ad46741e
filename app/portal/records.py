from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from app.portal.constants import (
    ACCOUNT_SETTINGS_KEY,
    DEFAULT_LANGUAGE,
    FUNCTIONS_DETAILS_KEY,
    MODULES_DETAILS_KEY,
    RECORD_KEYS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSnapshot:
    """
    Read-only view of the records stored at login.
    Any of the three may be None (nothing stored yet, or cleared at logout).
    """

    functions_details: Mapping[str, Any] | None = None
    modules_details: Mapping[str, Any] | None = None
    account_settings: Mapping[str, Any] | None = None

    @property
    def language(self) -> str | None:
        if not self.account_settings:
            return None
        return self.account_settings.get("Language")

    @property
    def is_regional(self) -> bool:
        # No settings at all counts as regional; the default name is still the fallback.
        return self.language != DEFAULT_LANGUAGE


def _mapping_or_none(store: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = store.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        logger.debug("Ignoring malformed %s record (type=%s)", key, type(value).__name__)
        return None
    return value


def snapshot_from_store(store: Mapping[str, Any]) -> RecordSnapshot:
    """Take a snapshot from any mapping-like store (usually flask.session)."""
    return RecordSnapshot(
        functions_details=_mapping_or_none(store, FUNCTIONS_DETAILS_KEY),
        modules_details=_mapping_or_none(store, MODULES_DETAILS_KEY),
        account_settings=_mapping_or_none(store, ACCOUNT_SETTINGS_KEY),
    )


def current_snapshot() -> RecordSnapshot:
    from flask import session

    return snapshot_from_store(session)


def store_login_package(store: MutableMapping[str, Any], package: Mapping[str, Any]) -> list[str]:
    """
    Persist the navigation records of an account-status package.
    The package replaces whatever an earlier login stored; keys missing (or null)
    in the package end up absent. Empty mappings are stored. Returns the keys stored.
    """
    clear_records(store)
    stored: list[str] = []
    for key in RECORD_KEYS:
        value = package.get(key)
        if value is not None:
            store[key] = value
            stored.append(key)
    return stored


def clear_records(store: MutableMapping[str, Any]) -> None:
    for key in RECORD_KEYS:
        store.pop(key, None)
