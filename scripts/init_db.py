from __future__ import annotations

import importlib

from dotenv import load_dotenv

from hostel_system.config import get_settings_module
from hostel_system.container import build_container
from hostel_system.database.bootstrap import ensure_indexes, list_collections
from hostel_system.logging_config import configure_logging


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(level="INFO")
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config)
    created = ensure_indexes(container.conn)

    print(
        "OK: Indexes ready -> "
        f"{db_config.get('uri')}/{db_config.get('database')} "
        f"(indexes={len(created)}, collections={len(list_collections(container.conn))})"
    )


if __name__ == "__main__":
    main()
