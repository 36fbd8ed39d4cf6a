"""
studyhub.config — YAML Configuration Loader
============================================

Reads ``config.yaml`` for the tunable, non-secret settings: site identity,
the credit economy and feed sizes.  Secrets and infrastructure
(``DATABASE_URL``, ``JWT_SECRET``, upload directory) come from the
environment instead.

Usage::

    from studyhub.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.site_name)         # "StudyHub"
    print(cfg.note_credits)      # 50
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from studyhub.engine.ledger import DEFAULT_NOTE_CREDITS


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class StudyHubConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    site_name: str

    # Economy
    starting_credits: int = 0  # Balance granted at sign-up (journaled)
    note_credits: int = DEFAULT_NOTE_CREDITS  # Award per uploaded note

    # Feeds
    leaderboard_size: int = 10
    recent_achievements: int = 5


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> StudyHubConfig:
    """Read *path* and return a :class:`StudyHubConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return StudyHubConfig(
        site_name=raw["site_name"],
        starting_credits=int(raw.get("starting_credits", 0)),
        note_credits=int(raw.get("note_credits", DEFAULT_NOTE_CREDITS)),
        leaderboard_size=int(raw.get("leaderboard_size", 10)),
        recent_achievements=int(raw.get("recent_achievements", 5)),
    )
