"""
Fonctions utilitaires partagées
"""
import re
import json
import logging
from typing import List, Optional
from pathlib import Path

from config import settings

logger = logging.getLogger(__name__)


# ============ Texte ============

def slugify(text: str, max_length: int = 80) -> str:
    """Convertit une chaîne en slug valide pour nom de fichier"""
    text = re.sub(r"[^\w\-\.]+", "-", text.strip(), flags=re.I)
    text = re.sub(r"-+", "-", text).strip("-")
    return (text[:max_length] or "file").lower()


def is_poor_text(text: str, min_chars: Optional[int] = None) -> bool:
    """Détermine si un texte OCR est trop pauvre pour être exploité"""
    text = (text or "").strip()
    min_chars = settings.POOR_TEXT_MIN_CHARS if min_chars is None else min_chars

    if not text or len(text) < min_chars:
        return True

    whitespace_count = sum(1 for c in text if c.isspace())
    whitespace_ratio = whitespace_count / max(1, len(text))

    return whitespace_ratio > settings.POOR_TEXT_WHITESPACE_RATIO


# ============ Fichiers ============

def read_ocr_text(path: Path) -> str:
    """Lit un fichier texte OCR (encodage configuré, repli latin-1)"""
    data = Path(path).read_bytes()
    try:
        return data.decode(settings.TEXT_ENCODING)
    except UnicodeDecodeError:
        logger.debug(f"Décodage {settings.TEXT_ENCODING} impossible pour {path}, repli {settings.FALLBACK_ENCODING}")
        return data.decode(settings.FALLBACK_ENCODING)


def collect_input_files(input_path: Path, pattern: str) -> List[Path]:
    """Un fichier, ou les fichiers d'un dossier correspondant au motif (triés)"""
    input_path = Path(input_path)
    if input_path.is_file():
        return [input_path]
    return sorted(p for p in input_path.glob(pattern) if p.is_file())


def write_json(path: Path, data, indent: Optional[int] = None):
    """Écrit un JSON UTF-8 lisible (accents conservés)"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=settings.JSON_INDENT if indent is None else indent, ensure_ascii=False)
