from __future__ import annotations

from pathlib import Path

import orjson
from platformdirs import user_data_dir

APP_NAME = "Hearth Calendar"
APP_AUTHOR = "Hearth"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
STORE_FILE = DATA_DIR / "household.json"
DEFAULT_STORE_CONTENT = {
    "events": [],
    "instances": [],
    "audit_log": [],
    "metadata": {"schema_version": 1},
}


def ensure_data_dir(store_file: Path = STORE_FILE) -> None:
    store_file.parent.mkdir(parents=True, exist_ok=True)
    if not store_file.exists():
        store_file.write_bytes(orjson.dumps(DEFAULT_STORE_CONTENT, option=orjson.OPT_INDENT_2) + b"\n")
