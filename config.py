"""
Configuration centralisée du projet
"""
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Charger variables d'environnement
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


@dataclass
class Settings:
    """Configuration globale de l'application"""

    # Chemins
    BASE_DIR: Path = Path(__file__).parent
    OUTPUT_DIR: Path = Path(os.getenv("APS_OUTPUT_DIR") or BASE_DIR / "out")

    # Entrées OCR
    INPUT_PATTERN: str = os.getenv("APS_INPUT_PATTERN", "*.txt")
    TEXT_ENCODING: str = os.getenv("APS_TEXT_ENCODING", "utf-8")
    FALLBACK_ENCODING: str = "latin-1"
    POOR_TEXT_MIN_CHARS: int = _env_int("APS_POOR_TEXT_MIN_CHARS", 200)
    POOR_TEXT_WHITESPACE_RATIO: float = 0.6

    # Traitement par lots
    MAX_WORKERS: int = _env_int("APS_MAX_WORKERS", 4)

    # Sorties
    JSON_INDENT: int = 2
    SUMMARY_FILENAME: str = "summary.csv"

    def ensure_dirs(self):
        """Crée les dossiers de sortie s'ils n'existent pas"""
        self.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        (self.OUTPUT_DIR / "parsed").mkdir(exist_ok=True)


# Instance globale
settings = Settings()
