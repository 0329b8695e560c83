from __future__ import annotations

import importlib

from dotenv import load_dotenv

from hostel_system.config import get_settings_module
from hostel_system.container import build_container
from hostel_system.database.bootstrap import DEMO_ADMIN, ensure_indexes, seed_demo_data
from hostel_system.logging_config import configure_logging


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(level="INFO")
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config)
    ensure_indexes(container.conn)
    seed_demo_data(container.conn)

    print(f"OK: Seeded database -> {db_config.get('database')} (admin={DEMO_ADMIN['email']})")


if __name__ == "__main__":
    main()
