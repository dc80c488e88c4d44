from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class EngineConfig:
    cache_enabled: bool = os.getenv("CITYMATCH_CACHE_ENABLED", "1") not in ("0", "false", "False")
    cache_ttl: float = float(os.getenv("CITYMATCH_CACHE_TTL", "300"))
    cache_max_entries: int = int(os.getenv("CITYMATCH_CACHE_MAX_ENTRIES", "5000"))


DEFAULT_ENGINE_CONFIG = EngineConfig()
