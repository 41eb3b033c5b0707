"""User preferences blob (currently just the color theme)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from .logging_setup import get_logger

_logger = get_logger("finance_ledger.prefs")


class Preferences(BaseModel):
    model_config = ConfigDict(extra="ignore")

    theme: Literal["light", "dark"] = "dark"

    def toggled_theme(self) -> Preferences:
        return self.model_copy(update={"theme": "light" if self.theme == "dark" else "dark"})

    def dumps(self) -> str:
        return self.model_dump_json()

    @classmethod
    def loads(cls, raw: str | None) -> Preferences:
        """Decode the persisted blob; absent or invalid data yields the defaults."""

        if not raw:
            return cls()
        try:
            return cls.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Ignoring invalid preferences record")
            return cls()


__all__ = ["Preferences"]
