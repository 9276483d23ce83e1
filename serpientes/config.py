"""Runtime settings, read from ``SERPIENTES_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from serpientes.narration import DEFAULT_LOCALE

RESULTS_DIR = Path("results")
DB_PATH = RESULTS_DIR / "serpientes.db"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Settings for the CLI and its game session.

    Attributes:
        db_path: SQLite file holding saved progress and game history.
        locale: Language tag passed to the narrator.
        muted: Silence narration.
        seed: Seed for the die; None rolls unpredictably.
    """
    db_path: Path = DB_PATH
    locale: str = DEFAULT_LOCALE
    muted: bool = False
    seed: int | None = None

    def with_overrides(self, **changes) -> Settings:
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    settings = Settings()

    db = env.get("SERPIENTES_DB")
    locale = env.get("SERPIENTES_LOCALE")
    muted = env.get("SERPIENTES_MUTED")
    seed = env.get("SERPIENTES_SEED")

    if seed:
        try:
            seed_value: int | None = int(seed)
        except ValueError:
            raise ValueError(f"SERPIENTES_SEED must be an integer, got {seed!r}") from None
    else:
        seed_value = None

    return settings.with_overrides(
        db_path=Path(db) if db else None,
        locale=locale or None,
        muted=muted.strip().lower() in _TRUTHY if muted else None,
        seed=seed_value,
    )
