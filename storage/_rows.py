from __future__ import annotations  # Row conversion shared by the stores

import datetime as dt
import json
from typing import Any, Optional
from uuid import uuid4


def now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def new_id() -> str:
    return uuid4().hex


def dump_json(value: Any) -> Optional[str]:
    return None if value is None else json.dumps(value, ensure_ascii=False)


def load_json(value: Optional[str], default: Any = None) -> Any:
    return default if value is None else json.loads(value)
