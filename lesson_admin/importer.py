"""
Import lessons and their screens from a JSON seed file into Firestore.

Seed layout:

    {
      "<lessonId>": {
        "title": "...",
        "published_at": "2024-01-15T00:00:00Z",
        "screens": {"screen_001": {...}, "screen_002": {...}}
      }
    }

Each lesson becomes lessons/{lessonId} (full replace, no `screens` field) and
each screen becomes lessons/{lessonId}/screens/{screenId} (full replace),
committed as one batch per lesson. Earlier lessons stay committed if a later
one fails.
"""
import argparse
import json
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from google.cloud import firestore

from lesson_admin.console import log_json, now_utc, print_error
from lesson_admin.core.config import settings
from lesson_admin.db.firestore import lesson_ref, screens_col
from lesson_admin.firebase_admin_init import init_firebase, require_service_account


class SeedFormatError(ValueError):
    """Seed file parsed as JSON but does not have the lesson/screens shape."""


@dataclass
class ImportSummary:
    lessons: int = 0
    screens: int = 0
    applied: bool = True


# ----------------------------
# Parsing
# ----------------------------

def load_seed(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SeedFormatError(f"Seed file must contain a JSON object of lessons, got {type(data).__name__}")
    return data


def parse_published_at(value: Any) -> datetime:
    """
    ISO-8601 string -> timezone-aware UTC datetime (stored by Firestore as a
    Timestamp). A trailing "Z" is accepted; naive and date-only values are
    taken as UTC.
    """
    if not isinstance(value, str):
        raise ValueError(f"published_at must be an ISO date string, got {type(value).__name__}")

    raw = value.strip()
    if raw[-1:] in ("Z", "z"):
        raw = raw[:-1] + "+00:00"

    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def split_lesson(lesson_id: str, record: Any) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Returns (lesson_doc, screens). `screens` is None when the record has none.
    """
    if not isinstance(record, dict):
        raise SeedFormatError(f"[{lesson_id}] Lesson record must be an object, got {type(record).__name__}")

    lesson_doc = dict(record)
    screens = lesson_doc.pop("screens", None)

    if screens is not None and not isinstance(screens, dict):
        raise SeedFormatError(f"[{lesson_id}] screens must be an object keyed by screen id")

    # Falsy values ("" / null) are written through unchanged.
    if lesson_doc.get("published_at"):
        try:
            lesson_doc["published_at"] = parse_published_at(lesson_doc["published_at"])
        except ValueError as e:
            raise ValueError(f"[{lesson_id}] Invalid published_at {lesson_doc['published_at']!r}: {e}") from e

    return lesson_doc, screens


# ----------------------------
# Writes
# ----------------------------

def import_lesson(db: firestore.Client, lesson_id: str, record: Any, apply: bool = True) -> int:
    """
    Writes one lesson and its screens. Returns the number of screens written
    (or that would be written on a dry run).
    """
    lesson_doc, screens = split_lesson(lesson_id, record)

    print(f"Importing lesson: {lesson_id}")

    ref = lesson_ref(db, lesson_id)
    if apply:
        ref.set(lesson_doc)
        print("  ✓ Lesson document created")
    else:
        print(f"  [DRY] SET {settings.lessons_collection}/{lesson_id}")

    if screens is None:
        return 0

    col = screens_col(db, lesson_id)
    batch = db.batch()
    staged: List[str] = []

    for screen_id, screen_data in screens.items():
        if not isinstance(screen_data, dict):
            raise SeedFormatError(f"[{lesson_id}] Screen {screen_id} must be an object")
        batch.set(col.document(screen_id), screen_data)
        staged.append(screen_id)

    if apply and staged:
        batch.commit()
        print(f"  ✓ {len(staged)} screens imported")
    elif apply:
        print("  ✓ 0 screens imported")
    else:
        print(f"  [DRY] {len(staged)} screens would be imported")

    return len(staged)


def import_lessons(db: firestore.Client, seed: Dict[str, Any], apply: bool = True) -> ImportSummary:
    summary = ImportSummary(applied=apply)

    for lesson_id, record in seed.items():
        summary.screens += import_lesson(db, lesson_id, record, apply=apply)
        summary.lessons += 1
        print(f"✅ {lesson_id} imported successfully\n")

    return summary


# ----------------------------
# Main
# ----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Import lessons and their screens from a JSON seed file into Firestore")
    parser.add_argument("seed", nargs="?", default=None, help=f"Seed JSON file (default: {settings.seed_file} in the project root)")
    parser.add_argument("--credentials", default=None, help=f"Service account key (default: {settings.service_account_file} in the project root)")
    parser.add_argument("--dry-run", action="store_true", help="Print planned writes without touching Firestore")
    args = parser.parse_args(argv)

    cred_path = require_service_account(
        args.credentials or settings.service_account_path,
        project_id=settings.firebase_project_id,
    )

    seed_path = Path(args.seed) if args.seed else settings.seed_path
    if not seed_path.exists():
        print(f"❌ Seed file not found: {seed_path}", file=sys.stderr)
        return 1

    try:
        db = init_firebase(cred_path)
        seed = load_seed(seed_path)

        print("📚 Importing lessons to Firestore...\n")
        summary = import_lessons(db, seed, apply=not args.dry_run)
    except Exception as e:
        print_error("Import failed", e)
        return 1

    print("🎉 All lessons imported successfully!")
    log_json(
        {
            "type": "import_lessons",
            "seed": str(seed_path),
            "lessons": summary.lessons,
            "screens": summary.screens,
            "applied": summary.applied,
            "utc": now_utc().isoformat(),
        }
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
