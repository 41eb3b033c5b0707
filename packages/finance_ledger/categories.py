"""Category registry: known category names and their display colors.

Exports
-------
- ``DEFAULT_CATEGORIES``: built-in names shipped with the ledger.
- ``color_for_category(name)``: deterministic color (fixed for built-ins,
  palette hash for everything else), memoized for the process lifetime.
- ``CategoryRegistry``: the live, sorted list of names. Built-ins are always
  present; user-added names come from manual creation or from transactions
  and are the only part that gets persisted.
"""

from __future__ import annotations

import json
import unicodedata
from collections.abc import Iterable, Iterator
from functools import lru_cache

from .logging_setup import get_logger

_logger = get_logger("finance_ledger.categories")

FALLBACK_CATEGORY = "Otros"

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Nómina",
    "Alquiler",
    "Supermercado",
    "Transporte",
    "Ocio",
    "Restaurantes",
    "Ropa y accesorios",
    "Suscripciones",
    "Salud",
    "Bizum",
    FALLBACK_CATEGORY,
)

FIXED_CATEGORY_COLORS: dict[str, str] = {
    "Nómina": "#22c55e",
    "Alquiler": "#f97316",
    "Supermercado": "#0ea5e9",
    "Transporte": "#6366f1",
    "Ocio": "#ec4899",
    "Restaurantes": "#facc15",
    "Ropa y accesorios": "#a855f7",
    "Suscripciones": "#06b6d4",
    "Salud": "#10b981",
    "Bizum": "#f97316",
    FALLBACK_CATEGORY: "#64748b",
}

CATEGORY_COLOR_PALETTE: tuple[str, ...] = (
    "#0ea5e9",
    "#22c55e",
    "#6366f1",
    "#e11d48",
    "#f97316",
    "#a855f7",
    "#14b8a6",
    "#facc15",
    "#4b5563",
    "#8b5cf6",
)

NEUTRAL_COLOR = "#64748b"


# ---------------------------
# Colors
# ---------------------------


def palette_index(name: str) -> int:
    """Hash ``name`` (lowercased) into an index of ``CATEGORY_COLOR_PALETTE``."""

    h = 0
    for ch in name.lower():
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h % len(CATEGORY_COLOR_PALETTE)


@lru_cache(maxsize=None)
def color_for_category(name: str) -> str:
    if not name:
        return NEUTRAL_COLOR
    fixed = FIXED_CATEGORY_COLORS.get(name)
    if fixed:
        return fixed
    return CATEGORY_COLOR_PALETTE[palette_index(name)]


# ---------------------------
# Names
# ---------------------------


def normalize_name(name: str) -> str:
    """Return ``name`` without surrounding whitespace.

    Inner spacing and case are kept: registry names must equal the category
    stored on transactions, which is only trimmed.
    """

    return name.strip()


def sort_key(name: str) -> str:
    """Case- and accent-insensitive collation key ("Nómina" sorts with "nomina")."""

    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


class CategoryRegistry:
    """Sorted set of category names, always containing the built-ins."""

    def __init__(self, extra: Iterable[str] = ()) -> None:
        self._names: list[str] = list(DEFAULT_CATEGORIES)
        for name in extra:
            self._insert(name)
        self._names.sort(key=sort_key)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    def extras(self) -> list[str]:
        """User-added names, i.e. what gets persisted."""

        return [n for n in self._names if n not in DEFAULT_CATEGORIES]

    def _insert(self, name: str) -> bool:
        n = normalize_name(str(name))
        if not n or n in self._names:
            return False
        self._names.append(n)
        return True

    def add(self, name: str) -> bool:
        """Add ``name``; return ``True`` when the registry changed."""

        if not self._insert(name):
            return False
        self._names.sort(key=sort_key)
        return True

    def sync_from(self, categories: Iterable[str]) -> bool:
        """Register every category seen on transactions; return ``True`` if any was new."""

        changed = False
        for name in categories:
            changed = self._insert(name) or changed
        if changed:
            self._names.sort(key=sort_key)
        return changed

    def color(self, name: str) -> str:
        return color_for_category(name)

    # ---- Persistence (JSON array of user-added names) ----------------------

    def dumps(self) -> str:
        return json.dumps(self.extras(), ensure_ascii=False)

    @classmethod
    def loads(cls, raw: str | None) -> CategoryRegistry:
        """Build a registry from the persisted record; absent/corrupt → built-ins only."""

        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError:
            _logger.warning("Ignoring corrupt category record")
            return cls()
        if not isinstance(data, list):
            _logger.warning("Ignoring category record that is not a list")
            return cls()
        return cls(str(c) for c in data if c is not None)


__all__ = [
    "CATEGORY_COLOR_PALETTE",
    "CategoryRegistry",
    "DEFAULT_CATEGORIES",
    "FALLBACK_CATEGORY",
    "FIXED_CATEGORY_COLORS",
    "color_for_category",
    "normalize_name",
    "palette_index",
    "sort_key",
]
