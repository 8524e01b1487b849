import os
from pathlib import Path

# Basic settings helper to read environment configuration.

DEFAULT_OUTPUT_FOLDER = "Google Maps/Places"
DEFAULT_SNAPSHOT_DB = Path(__file__).resolve().parent / "data" / "note_snapshots.sqlite"


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self) -> None:
        self.VAULT_ROOT: str = os.getenv("TAKEOUT_VAULT_ROOT") or "vault"
        self.OUTPUT_FOLDER: str = os.getenv("TAKEOUT_OUTPUT_FOLDER") or DEFAULT_OUTPUT_FOLDER
        self.SNAPSHOT_DB: str = os.getenv("TAKEOUT_SNAPSHOT_DB") or str(DEFAULT_SNAPSHOT_DB)
        self.INCLUDE_COORDINATES: bool = _as_bool(os.getenv("TAKEOUT_INCLUDE_COORDINATES"), True)


settings = Settings()
