"""
Rebuilds the cached point totals (users.points, communities.total_points)
from the point ledger.

    python -m roomly.jobs.reconcile           # once
    python -m roomly.jobs.reconcile --loop    # on RECONCILE_CRON
"""
from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from croniter import croniter

from roomly import config
from roomly.db import SessionLocal
from roomly.services.points_ledger_service import reconcile_all


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def compute_next_run_at(*, base_utc: datetime, cron_expr: str, tz_name: str = "UTC") -> datetime:
    tz = ZoneInfo(tz_name)
    base_local = base_utc.replace(tzinfo=ZoneInfo("UTC")).astimezone(tz)
    next_local: datetime = croniter(cron_expr, base_local).get_next(datetime)
    return next_local.astimezone(ZoneInfo("UTC")).replace(tzinfo=None)


def run_once(session_factory=SessionLocal) -> dict:
    db = session_factory()
    try:
        stats = reconcile_all(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    logger.info("points reconciliation done", extra=stats)
    return stats


def run_loop(*, cron_expr: str, tz_name: str, max_sleep_seconds: int = 300):
    logger.info("points reconciliation loop started", extra={"cron": cron_expr, "timezone": tz_name})

    next_run_at = compute_next_run_at(base_utc=_utcnow(), cron_expr=cron_expr, tz_name=tz_name)
    while True:
        now = _utcnow()
        if now < next_run_at:
            time.sleep(min(max_sleep_seconds, max(1, int((next_run_at - now).total_seconds()))))
            continue

        try:
            run_once()
        except Exception:
            # keep the schedule moving
            logger.exception("points reconciliation failed")
        next_run_at = compute_next_run_at(base_utc=_utcnow(), cron_expr=cron_expr, tz_name=tz_name)


def main():
    parser = argparse.ArgumentParser(description="Reconcile cached point totals with the ledger")
    parser.add_argument("--loop", action="store_true", help="keep running on RECONCILE_CRON")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    if args.loop:
        run_loop(cron_expr=config.RECONCILE_CRON, tz_name=config.RECONCILE_TIMEZONE)
    else:
        run_once()


if __name__ == "__main__":
    main()
