#!/usr/bin/env python3
"""
Eunoia 数据库初始化
Creates the schema for the configured DATABASE_URL and optionally seeds a user.

用法:
    python scripts/init_db.py
    python scripts/init_db.py --seed-user telex-demo
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from eunoia.config.settings import settings
from eunoia.data_persistence import DatabaseManager, UserRepository, create_tables

logger = logging.getLogger("eunoia.init_db")


def setup_schema(manager: DatabaseManager) -> None:
    logger.info(f"🔧 Creating tables on {settings.database_url}")
    create_tables(bind=manager.engine)
    if not manager.health_check():
        raise RuntimeError("database is not reachable after table creation")
    logger.info("✅ Schema ready")


def seed_user(manager: DatabaseManager, platform_user_id: str) -> None:
    with manager.create_session() as db:
        user = UserRepository(db).get_or_create_user(platform_user_id)
        logger.info(f"👤 Seed user {user.platform_user_id} -> {user.id}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the Eunoia database schema")
    parser.add_argument("--seed-user", metavar="PLATFORM_USER_ID", help="get-or-create this platform user")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    manager = DatabaseManager()
    try:
        setup_schema(manager)
        if args.seed_user:
            seed_user(manager, args.seed_user)
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
