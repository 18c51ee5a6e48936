#!/usr/bin/env python3
"""
Standalone database initialization script
Creates the users and meals tables in the configured database
"""

import sys
import os
import logging

# Ensure we're using the right Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from app.config import settings
from domain.models import create_db_engine, init_database

logger = logging.getLogger("dailydiet.scripts.init_db")


def main() -> int:
    engine = create_db_engine(settings.database_url, echo=settings.db_echo)
    try:
        init_database(engine)
    except Exception:
        logger.exception("Database initialization failed")
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=settings.log_format)

    print("\n" + "=" * 60)
    print("DailyDiet Database Initialization")
    print("=" * 60 + "\n")

    exit_code = main()

    if exit_code == 0:
        print("\nSUCCESS! Tables 'users' and 'meals' are ready.\n")
    else:
        print("\nFAILED! Check the errors above.\n")

    sys.exit(exit_code)
