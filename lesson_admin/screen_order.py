"""
Backfill lessons/{lessonId}/screens/{screenId}.order from the trailing digits
of each screen id ("screen_001" -> 1).

Only missing `order` fields are written, as merge updates batched per lesson.
Existing values are never overwritten, so re-running is a no-op.
"""
import argparse
import re
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from google.cloud import firestore

from lesson_admin.console import log_json, now_utc, print_error
from lesson_admin.core.config import settings
from lesson_admin.db.firestore import lessons_col, screens_col
from lesson_admin.firebase_admin_init import init_firebase, require_service_account


# ASCII digits only, anchored at the absolute end (no trailing-newline match).
ORDER_SUFFIX_RE = re.compile(r"([0-9]+)\Z")

ASSIGN = "assign"
PRESENT = "present"
NO_SUFFIX = "no_suffix"


@dataclass(frozen=True)
class OrderDecision:
    status: str  # "assign" | "present" | "no_suffix"
    order: Optional[int] = None
    existing: Any = None


@dataclass
class OrderSummary:
    lessons: int = 0
    screens: int = 0
    updated: int = 0
    present: int = 0
    no_suffix: int = 0
    applied: bool = True


def order_from_id(screen_id: str) -> Optional[int]:
    m = ORDER_SUFFIX_RE.search(screen_id)
    if not m:
        return None
    return int(m.group(1), 10)


def decide_order(screen_id: str, data: Dict[str, Any]) -> OrderDecision:
    order = order_from_id(screen_id)
    if order is None:
        return OrderDecision(status=NO_SUFFIX)

    # Key presence, not truthiness: 0 and null both count as set.
    if "order" in data:
        return OrderDecision(status=PRESENT, order=order, existing=data["order"])

    return OrderDecision(status=ASSIGN, order=order)


def fix_lesson_screens(db: firestore.Client, lesson_id: str, summary: OrderSummary) -> int:
    """
    Stages order updates for one lesson's screens and commits them in a
    single batch. Returns the number of screens updated.
    """
    snaps = list(screens_col(db, lesson_id).stream())
    if not snaps:
        print("  ⚠️  No screens found")
        return 0

    batch = db.batch()
    update_count = 0

    for snap in snaps:
        summary.screens += 1
        decision = decide_order(snap.id, snap.to_dict() or {})

        if decision.status == NO_SUFFIX:
            summary.no_suffix += 1
            print(f"  ⚠️  {snap.id}: couldn't extract order from ID")
        elif decision.status == PRESENT:
            summary.present += 1
            print(f"  - {snap.id}: order already exists ({decision.existing})")
        else:
            batch.update(snap.reference, {"order": decision.order})
            update_count += 1
            print(f"  ✓ {snap.id}: adding order = {decision.order}")

    if update_count == 0:
        print("  ✓ All screens already have order field\n")
        return 0

    if summary.applied:
        batch.commit()
        print(f"  ✅ Updated {update_count} screens\n")
    else:
        print(f"  [DRY] {update_count} screens would be updated\n")

    summary.updated += update_count
    return update_count


def fix_screen_order(db: firestore.Client, apply: bool = True) -> OrderSummary:
    summary = OrderSummary(applied=apply)

    for lesson in lessons_col(db).stream():
        summary.lessons += 1
        print(f"Processing lesson: {lesson.id}")
        fix_lesson_screens(db, lesson.id, summary)

    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Backfill missing screen `order` fields from screen ids")
    parser.add_argument("--credentials", default=None, help=f"Service account key (default: {settings.service_account_file} in the project root)")
    parser.add_argument("--dry-run", action="store_true", help="Report missing order fields without writing")
    args = parser.parse_args(argv)

    cred_path = require_service_account(args.credentials or settings.service_account_path)

    try:
        db = init_firebase(cred_path)

        print("🔧 Fixing screen order fields in Firestore...\n")
        summary = fix_screen_order(db, apply=not args.dry_run)
    except Exception as e:
        print_error("Fix failed", e)
        return 1

    print("🎉 Screen order fields fixed successfully!")
    log_json(
        {
            "type": "fix_screen_order",
            "lessons": summary.lessons,
            "screens": summary.screens,
            "updated": summary.updated,
            "already_present": summary.present,
            "no_suffix": summary.no_suffix,
            "applied": summary.applied,
            "utc": now_utc().isoformat(),
        }
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
