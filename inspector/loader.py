from __future__ import annotations

from functools import lru_cache

from tutor_onboarding.catalog import CatalogStore
from tutor_onboarding.config import load_settings


@lru_cache(maxsize=1)
def load_store_local() -> CatalogStore:
    settings = load_settings()
    store = CatalogStore(settings.ruleset_dir)
    store.load()
    return store


def reload_store_local() -> CatalogStore:
    load_store_local.cache_clear()
    return load_store_local()
