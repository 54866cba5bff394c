#!/usr/bin/env python3
"""
CLI de parsing des textes OCR d'APS (fiches techniques de raccordement)
Usage:
    python extract.py --input ocr/plan_0042.ocr.txt --stdout
    python extract.py --input ocr/ --output out/parsed --benchmark
"""
import sys
import json
import time
import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed

import pandas as pd

from config import settings
from aps_parser import parse
from utils import (
    slugify,
    is_poor_text,
    read_ocr_text,
    collect_input_files,
    write_json,
)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def output_name(path: Path) -> str:
    """plan 0042.ocr.txt → plan-0042.ocr.parsed.json"""
    return f"{slugify(path.stem)}.parsed.json"


# ============ Parsing Parallèle ============

def parse_file_worker(path: Path) -> Tuple[Path, Optional[Dict], Dict, str]:
    """Worker pour parsing parallèle d'un fichier OCR"""
    try:
        text = read_ocr_text(path)
    except OSError as e:
        logger.error(f"Lecture échouée {path}: {e}")
        return path, None, {"file": path.name}, "failed"

    poor = is_poor_text(text)
    if poor:
        logger.warning(f"⚠️  Texte OCR pauvre: {path.name} ({len(text.strip())} caractères)")

    record = parse(text)
    row = {"file": path.name, **record.to_summary_row(), "poor_text": poor}
    return path, record.to_dict(), row, "ok"


def run_batch(files: List[Path], workers: int) -> Tuple[List[Tuple[Path, Optional[Dict], Dict, str]], bool]:
    """
    Parse tous les fichiers ; résultats dans l'ordre des fichiers.

    Sur Ctrl+C, les fichiers non commencés sont annulés et seuls les résultats
    déjà obtenus sont renvoyés (avec interrupted=True).
    """
    results = {}
    interrupted = False

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        futures = {executor.submit(parse_file_worker, path): path for path in files}

        try:
            for future in as_completed(futures):
                path = futures[future]
                try:
                    results[path] = future.result()
                except Exception as e:
                    logger.error(f"Parsing échoué {path}: {e}")
                    results[path] = (path, None, {"file": path.name}, "failed")
        except KeyboardInterrupt:
            logger.warning("\nInterruption utilisateur")
            interrupted = True
            for future in futures:
                future.cancel()

    return [results[path] for path in files if path in results], interrupted


def write_outputs(results, output_dir: Path, started_at: float, input_path: Path) -> Dict:
    """JSON par fichier, synthèse CSV et rapport JSON"""
    output_dir.mkdir(parents=True, exist_ok=True)

    for path, record, _, status in results:
        if status == "ok":
            write_json(output_dir / output_name(path), record)

    rows = [row for _, _, row, status in results if status == "ok"]
    summary_path = output_dir / settings.SUMMARY_FILENAME
    pd.DataFrame(rows).to_csv(summary_path, index=False, encoding="utf-8")

    ok = [r for r in results if r[3] == "ok"]
    report = {
        "metadata": {
            "input": str(input_path),
            "output_dir": str(output_dir),
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "duration_seconds": round(time.time() - started_at, 2),
        },
        "statistics": {
            "files_total": len(results),
            "files_parsed": len(ok),
            "files_failed": len(results) - len(ok),
            "poor_texts": sum(1 for row in rows if row.get("poor_text")),
            "with_poste": sum(1 for row in rows if row.get("poste_numero")),
            "with_affaire": sum(1 for row in rows if row.get("affaire_num")),
            "pdls_total": sum(row.get("n_pdls", 0) for row in rows),
        },
        "files": [path.name for path, _, _, _ in results],
    }
    write_json(output_dir / (summary_path.stem + "_report.json"), report)

    logger.info(f"✓ {len(ok)} fichier(s) parsé(s) → {output_dir}")
    return report


# ============ Main ============

def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Parsing des textes OCR d'APS de raccordement (poste DP, HTA, BT, PDL)"
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Fichier texte OCR, ou dossier de fichiers OCR"
    )
    parser.add_argument(
        "--output",
        help="Dossier de sortie (défaut: out/parsed/)"
    )
    parser.add_argument(
        "--pattern",
        default=settings.INPUT_PATTERN,
        help=f"Motif des fichiers d'un dossier (défaut: {settings.INPUT_PATTERN})"
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Afficher le JSON au lieu d'écrire les fichiers"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.MAX_WORKERS,
        help="Nombre de fichiers parsés en parallèle"
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Limiter nombre de fichiers (pour tests)"
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Afficher statistiques de performance"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mode verbose (logs DEBUG)"
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    # Validation input
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Fichier introuvable: {input_path}")
        sys.exit(1)

    files = collect_input_files(input_path, args.pattern)
    if args.limit:
        files = files[:args.limit]

    if not files:
        logger.warning(f"Aucun fichier '{args.pattern}' dans {input_path}")
        sys.exit(1)

    logger.info(f"{len(files)} fichier(s) OCR à parser")

    start_time = time.time()
    results, interrupted = run_batch(files, args.workers)
    duration = time.time() - start_time

    if args.stdout:
        records = {path.name: record for path, record, _, status in results if status == "ok"}
        payload = next(iter(records.values())) if len(files) == 1 and records else records
        print(json.dumps(payload, indent=settings.JSON_INDENT, ensure_ascii=False))
        if interrupted:
            sys.exit(130)
        return

    if args.output:
        output_dir = Path(args.output)
    else:
        settings.ensure_dirs()
        output_dir = settings.OUTPUT_DIR / "parsed"

    report = write_outputs(results, output_dir, start_time, input_path)
    stats = report["statistics"]

    # Résumé
    print("\n" + "="*70)
    print("RÉSUMÉ PARSING APS")
    print("="*70)
    print(f"Fichiers parsés:   {stats['files_parsed']}/{stats['files_total']}")
    print(f"Avec poste DP:     {stats['with_poste']}")
    print(f"Avec affaire:      {stats['with_affaire']}")
    print(f"PDL extraits:      {stats['pdls_total']}")
    print(f"Durée:             {duration:.1f}s")
    print(f"Dossier sortie:    {output_dir}")
    print("="*70)

    if args.benchmark:
        print("\n⏱️  PERFORMANCE")
        print(f"   Durée totale:        {duration:.2f}s")
        print(f"   Fichiers/seconde:    {len(files)/max(duration, 1e-6):.1f}")
        print(f"   Temps moyen/fichier: {duration/max(1, len(files))*1000:.1f}ms")

    if interrupted:
        sys.exit(130)
    if stats["files_failed"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
