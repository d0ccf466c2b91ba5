"""
Convert a CSV backup plan into a SQLite database or a MySQL table.

    python scripts/convert.py sqlite plan.csv plan.db
    python scripts/convert.py mysql plan.csv [table-name]

The mysql mode reads MYSQL_HOST, MYSQL_PORT, MYSQL_USER, MYSQL_PASS and
MYSQL_DATABASE from the environment.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.exc import SQLAlchemyError

from backup_plan_ui.config import get_settings
from backup_plan_ui.converter import convert_csv_to_mysql, convert_csv_to_sqlite

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Backup plan CSV converter")
    modes = parser.add_subparsers(dest="mode", required=True)

    sqlite = modes.add_parser("sqlite", help="Write the plan to a SQLite file")
    sqlite.add_argument("csv_path", help="Path to the CSV plan")
    sqlite.add_argument("sqlite_path", help="Path to the SQLite database")

    mysql = modes.add_parser("mysql", help="Write the plan to a MySQL table")
    mysql.add_argument("csv_path", help="Path to the CSV plan")
    mysql.add_argument(
        "table_name",
        nargs="?",
        default=None,
        help="Target table (default: MYSQL_TABLE or entries)",
    )
    return parser


def main() -> int:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    try:
        if args.mode == "sqlite":
            convert_csv_to_sqlite(args.csv_path, args.sqlite_path)
        else:
            settings = get_settings()
            missing = settings.missing_mysql_settings()
            if missing:
                logger.error(
                    "Missing required environment variables: %s",
                    ", ".join(missing),
                )
                return 1
            convert_csv_to_mysql(
                args.csv_path,
                host=settings.mysql_host,
                port=settings.mysql_port,
                user=settings.mysql_user,
                password=settings.mysql_pass,
                database=settings.mysql_database,
                table_name=args.table_name or settings.mysql_table,
            )
    except (OSError, ValueError, SQLAlchemyError) as exc:
        logger.error("Conversion failed: %s", exc)
        return 1

    print("Data conversion was successful.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
