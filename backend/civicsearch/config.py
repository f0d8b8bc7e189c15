"""Configuration for the district lookup service."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ── Paths ─────────────────────────────────────────────────────────────────────
BACKEND_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.getenv("CIVICSEARCH_DATA_DIR", BACKEND_ROOT / "data"))

BOUNDARY_ARCHIVE_PATH = Path(
    os.getenv("CIVICSEARCH_BOUNDARY_ARCHIVE", DATA_DIR / "tl_2019_25_sldl.zip")
)

# ── Shapefile attributes ──────────────────────────────────────────────────────
# TIGER/Line files store the district display name in NAMELSAD
NAME_FIELD: str = os.getenv("CIVICSEARCH_NAME_FIELD", "NAMELSAD")
DBF_ENCODING: str = os.getenv("CIVICSEARCH_DBF_ENCODING", "utf-8")

# ── Logging ───────────────────────────────────────────────────────────────────

# Names understood by both logging.basicConfig and uvicorn.run
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_log_level(value: str) -> str:
    """Normalise a level name, rejecting anything outside LOG_LEVELS."""
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        known = ", ".join(LOG_LEVELS)
        raise ValueError(f"Invalid CIVICSEARCH_LOG_LEVEL {value!r}; expected one of: {known}")
    return level


LOG_LEVEL: str = parse_log_level(os.getenv("CIVICSEARCH_LOG_LEVEL", "INFO"))

# ── Server ────────────────────────────────────────────────────────────────────
HOST: str = os.getenv("CIVICSEARCH_HOST", "127.0.0.1")
PORT: int = int(os.getenv("CIVICSEARCH_PORT", "8000"))
