# cleanup_theft_reports.py
"""
Delete resolved theft reports older than N days.

Runs with the backend's own database credentials, outside any user
session, e.g. from a nightly cron:

    python cleanup_theft_reports.py --days 365
"""

import argparse
import logging

from sqlmodel import Session

from keep.database import engine
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.theft_report_repo import TheftReportRepository
from keep.services.theft_report_service import TheftReportService


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--days",
        type=int,
        default=365,
        help="Remove resolved reports created more than this many days ago",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    service = TheftReportService(TheftReportRepository(), AssetRepository())

    with Session(engine) as session:
        removed = service.cleanup_resolved(session, days_old=args.days)

    print(f"Removed {removed} resolved theft report(s).")


if __name__ == "__main__":
    main()
