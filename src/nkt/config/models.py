"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``nkt.toml`` only carries
overrides. A fresh root directory needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel

from nkt.domain.types import DirectoryIndexPolicy

# --- nkt.toml sections ---


class TimeConfig(BaseModel):
    """[time] section."""

    model_config = {"frozen": True}

    # IANA name such as "Europe/Berlin"; None means the system timezone.
    timezone: str | None = None


class SelectionConfig(BaseModel):
    """[selection] section."""

    model_config = {"frozen": True}

    directory_index: DirectoryIndexPolicy = DirectoryIndexPolicy.REJECT
