"""Keyword rules that infer a category from a bank statement concept.

Rules are evaluated in table order and the first match wins, so more
specific rules must come before broader ones (e.g. ``Bizum`` transfers would
otherwise be caught by generic payment keywords under ``Ocio``). Keywords are
lowercase substrings; some carry a trailing space on purpose ("dia ", "bp ")
to avoid matching inside longer words.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from .categories import FALLBACK_CATEGORY
from .models import TransactionType


@dataclass(frozen=True, slots=True)
class CategoryRule:
    category: str
    keywords: tuple[str, ...]
    # Only applies to transactions of this type when set.
    type: TransactionType | None = None

    def matches(self, text: str, type_: TransactionType) -> bool:
        """``text`` must already be lowercased."""

        if self.type is not None and self.type != type_:
            return False
        return any(kw in text for kw in self.keywords)


AUTO_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("Bizum", ("bizum",)),
    CategoryRule(
        "Restaurantes",
        (
            "mc",
            "burger",
            "bk",
            "kfc",
            "pizz",
            "dp",
            "restaurant",
            "keba",
            "sushi",
            "sumo",
            "food",
            "japo",
        ),
    ),
    CategoryRule(
        "Supermercado",
        (
            "mercadona",
            "carrefour",
            "dia ",
            "suma",
            "lidl",
            "aldi",
            "hipercor",
            "supermercado",
            "ahorro",
            "super",
            "alimentac",
            "escla",
            "condis",
            "home",
            "drim",
            "goiko",
        ),
    ),
    CategoryRule(
        "Ropa y accesorios",
        (
            "zara",
            "bear",
            "pull",
            "stradivarius",
            "bershka",
            "dutti",
            "h&m",
            "hm",
            "primark",
            "nike",
            "adidas",
            "sprinter",
            "decathlon",
            "foot locker",
            "lefties",
            "snipes",
            "cn",
        ),
    ),
    CategoryRule(
        "Transporte",
        (
            "uber",
            "cabify",
            "renfe",
            "metro",
            "bus",
            "tmb",
            "taxi",
            "repsol",
            "cepsa",
            "bp ",
            "galp",
            "fgc",
            "mobilit",
            "gasolin",
        ),
    ),
    CategoryRule(
        "Suscripciones",
        ("netf", "spot", "hbo", "max", "prim", "disn", "appl", "premium", "piscin", "esports"),
    ),
    CategoryRule("Nómina", ("nómina", "nomina", "salari", "payroll"), type="income"),
    CategoryRule("Salud", ("farmacia", "dent", "clinica", "clínica", "seguro salud", "odont")),
    CategoryRule(
        "Ocio",
        (
            "steam",
            "playstation",
            "psn",
            "xbox",
            "game ",
            "tick",
            "entradas",
            "cine",
            "microsoft",
            "sumup",
            "bolera",
            "gran clips",
            "pay",
            "sala",
            "ovella",
            "fourvenues",
            "helader",
        ),
    ),
)


def infer_category(
    note: str | None,
    amount: Decimal | None,
    type_: TransactionType,
    *,
    rules: Sequence[CategoryRule] = AUTO_CATEGORY_RULES,
    fallback: str = FALLBACK_CATEGORY,
) -> str:
    """Return the category of the first rule matching ``note``.

    ``amount`` is accepted so callers can pass the whole row; matching only
    looks at the text and the type.
    """

    if not note:
        return fallback
    text = note.lower()
    for rule in rules:
        if rule.matches(text, type_):
            return rule.category
    return fallback


__all__ = ["AUTO_CATEGORY_RULES", "CategoryRule", "infer_category"]
