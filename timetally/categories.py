from __future__ import annotations

import logging

from .errors import DuplicateCategory, InvalidCategory
from .models import Store

logger = logging.getLogger(__name__)


def add_category(store: Store, name: str) -> None:
    if not name.strip():
        raise InvalidCategory("Category name must not be empty.")
    if name in store.categories:
        raise DuplicateCategory(name)

    store.categories.append(name)
    logger.info("Category added: %s", name)


def category_exists(store: Store, name: str) -> bool:
    return name in store.categories


def list_categories(store: Store) -> list[str]:
    return list(store.categories)
