"""
Serve the backup plan UI.

    python scripts/serve.py plan.csv
    python scripts/serve.py plan.db --source sqlite
    python scripts/serve.py --source mysql   # credentials from MYSQL_* variables
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backup_plan_ui.app import create_app
from backup_plan_ui.config import get_settings
from backup_plan_ui.dependencies import build_data_source

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Backup plan UI server")
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="CSV file or SQLite database (default: BACKUP_PLAN_UI_DATA_PATH)",
    )
    parser.add_argument(
        "--source",
        choices=["csv", "sqlite", "mysql"],
        default=None,
        help="Storage backend (default: BACKUP_PLAN_UI_SOURCE or csv)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: BACKUP_PLAN_UI_PORT or 4000)",
    )
    args = parser.parse_args()

    settings = get_settings().with_overrides(
        data_path=args.path, source=args.source, port=args.port
    )

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    try:
        source = build_data_source(settings)
    except ValueError as exc:
        logger.error("%s", exc)
        parser.print_usage(sys.stderr)
        return 1

    uvicorn.run(
        create_app(source),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
