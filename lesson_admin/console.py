import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def log_json(obj: Dict[str, Any]) -> None:
    # One parseable line per record; falls back to repr for odd payloads.
    try:
        print(json.dumps(obj, default=str), flush=True)
    except Exception:
        print(str(obj), flush=True)


def print_error(prefix: str, err: BaseException) -> None:
    print(f"❌ {prefix}: {err}", file=sys.stderr, flush=True)
