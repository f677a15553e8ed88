from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.office_attendance.office_attendance.database.bootstrap import (  # noqa: E402
    apply_schema,
    ensure_demo_users,
    list_tables,
)
from src.office_attendance.office_attendance.database.connection import DBConfig, DatabaseConnection  # noqa: E402
from src.office_attendance.office_attendance.main import SCHEMA_PATH, load_settings  # noqa: E402


def main() -> None:
    settings = load_settings()
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(settings.DB_CONFIG))

    apply_schema(conn, schema_path=SCHEMA_PATH)
    if "--seed" in sys.argv[1:]:
        ensure_demo_users(conn)

    cfg = conn.config
    print(f"OK: Applied schema.sql -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database} (tables={len(list_tables(conn))})")


if __name__ == "__main__":
    main()
