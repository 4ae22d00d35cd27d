"""Back up the user snapshot.

Copies the current JSON file to backups/ with a timestamp suffix.
"""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

from _settings import REPO_ROOT, settings


def main() -> None:
    cfg = settings()
    source = Path(cfg["USERS_FILE"])
    if not source.exists():
        raise SystemExit(f"No user snapshot at {source}")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"users_{ts}.json"
    shutil.copy2(source, out_file)
    print(f"OK: backup -> {out_file}")


if __name__ == "__main__":
    main()
