"""
Runtime configuration read from the environment.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

BUILTIN_PACKS_DIR = Path(__file__).parent / "data" / "packs"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Server and content settings."""
    
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=8000, ge=1, le=65535, description="Port to bind")
    log_level: str = Field(default="info", description="Root log level")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload")
    packs_dir: Path = Field(default=BUILTIN_PACKS_DIR, description="Directory of pack JSON files")
    bonus_pack_path: Optional[Path] = Field(
        default=None,
        description="Optional pack offered only to the gated origin"
    )
    bonus_pack_name: str = Field(default="Bonus", min_length=1)
    bonus_origin_id: Optional[str] = Field(
        default=None,
        description="Origin (guild) id allowed to see the bonus pack"
    )
    duplicate_bonus_pack: bool = Field(
        default=True,
        description="Offer the bonus pack twice in the pack list"
    )
    
    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CAH_* environment variables."""
        values = {
            "host": os.getenv("CAH_HOST", "0.0.0.0"),
            "port": int(os.getenv("CAH_PORT", os.getenv("PORT", 8000))),
            "log_level": os.getenv("LOG_LEVEL", "info").lower(),
            "reload": _env_bool("RELOAD", False),
            "bonus_pack_name": os.getenv("CAH_BONUS_PACK_NAME", "Bonus"),
            "bonus_origin_id": os.getenv("CAH_BONUS_ORIGIN") or None,
            "duplicate_bonus_pack": _env_bool("CAH_DUPLICATE_BONUS", True),
        }
        if os.getenv("CAH_PACKS_DIR"):
            values["packs_dir"] = Path(os.environ["CAH_PACKS_DIR"])
        if os.getenv("CAH_BONUS_PACK"):
            values["bonus_pack_path"] = Path(os.environ["CAH_BONUS_PACK"])
        return cls(**values)


# Default configuration instance
default_settings = Settings()
