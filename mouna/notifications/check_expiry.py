#!/usr/bin/env python3
"""Run the expiry scan once, outside the web server (for cron)."""
import argparse
import json
import sys

from loguru import logger

from mouna.config import settings
from mouna.database import build_engine, build_session_factory, init_db
from mouna.integrations.onesignal import OneSignalClient
from mouna.logger import configure_logging
from mouna.notifications.service import check_expiry


def main(argv=None):
    parser = argparse.ArgumentParser(description="Send a push alert for products expiring within 7 days.")
    parser.add_argument(
        "--database-url", default=settings.DATABASE_URL,
        help="Database URL (default: DATABASE_URL from the environment)"
    )
    args = parser.parse_args(argv)

    configure_logging(settings)
    engine = build_engine(args.database_url)
    init_db(engine)
    db = build_session_factory(engine)()
    notifier = OneSignalClient.from_settings(settings)

    try:
        result = check_expiry(db, notifier)
    except Exception:
        logger.exception("Check Expiry Cron Job Error")
        return 1
    finally:
        db.close()
        notifier.close()
        engine.dispose()

    print(json.dumps(result, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
