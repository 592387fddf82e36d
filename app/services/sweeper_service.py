# app/services/sweeper_service.py
"""
Lifecycle Sweeper. Time-based booking transitions nobody asks for explicitly.

  expire_active()        active bookings whose end_time has passed → completed
  cancel_stale_pending() pending bookings unpaid for PENDING_MAX_AGE_MINUTES → cancelled

Both release one vehicle unit per booking. Every booking is handled in its own
transaction: one failing record is logged and the rest are still processed.
run_lifecycle_sweeper() runs both jobs on a fixed interval; main.py starts it.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session
from app.config import settings
from app.database import SessionLocal
from app.models.booking import Booking, BookingStatus
from app.services.booking_service import complete_booking, expire_pending_booking
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _sweep(db: Session, bookings: list, handler, label: str) -> int:
    done = 0
    for booking_id, vehicle_id in bookings:
        try:
            if handler(db, booking_id, vehicle_id):
                done += 1
            else:
                logger.info(f"[Sweeper] {label}: booking {booking_id} changed since fetch — skipped")
        except Exception as e:
            db.rollback()
            logger.error(f"[Sweeper] {label}: booking {booking_id} failed: {e}", exc_info=True)
    return done


def expire_active(db: Session, now: Optional[datetime] = None) -> int:
    """Completes active bookings that have ended. Returns how many were completed."""
    now = now or utcnow()
    expired = (
        db.query(Booking.id, Booking.vehicle_id)
        .filter(Booking.status == BookingStatus.ACTIVE, Booking.end_time <= now)
        .all()
    )
    completed = _sweep(db, expired, complete_booking, "expire_active")
    if expired:
        logger.info(f"[Sweeper] Completed {completed}/{len(expired)} finished bookings")
    return completed


def cancel_stale_pending(db: Session, max_age_minutes: Optional[int] = None,
                         now: Optional[datetime] = None) -> int:
    """Cancels pending bookings older than max_age_minutes. Returns how many were cancelled."""
    if max_age_minutes is None:
        max_age_minutes = settings.PENDING_MAX_AGE_MINUTES
    cutoff = (now or utcnow()) - timedelta(minutes=max_age_minutes)
    stale = (
        db.query(Booking.id, Booking.vehicle_id)
        .filter(Booking.status == BookingStatus.PENDING, Booking.created_at <= cutoff)
        .all()
    )
    cancelled = _sweep(db, stale, expire_pending_booking, "cancel_stale_pending")
    if stale:
        logger.info(f"[Sweeper] Cancelled {cancelled}/{len(stale)} unpaid bookings")
    return cancelled


def run_sweep_once():
    """One sweeper tick with a fresh DB session. A failing job does not skip the other."""
    db = SessionLocal()
    try:
        for label, job in (("expire_active", expire_active), ("cancel_stale_pending", cancel_stale_pending)):
            try:
                job(db)
            except Exception as e:
                db.rollback()
                logger.error(f"[Sweeper] {label} failed: {e}", exc_info=True)
    finally:
        db.close()


async def run_lifecycle_sweeper(interval_seconds: Optional[int] = None):
    """
    Runs the sweeper forever, one tick every interval_seconds.
    Ticks run in a worker thread so the DB work never blocks the event loop.
    Errors are logged; the loop only stops when the task is cancelled.
    """
    interval = interval_seconds or settings.SWEEPER_INTERVAL_SECONDS
    logger.info(f"🧹 Lifecycle sweeper started (every {interval}s)")
    while True:
        try:
            await asyncio.to_thread(run_sweep_once)
        except Exception as e:
            logger.error(f"[Sweeper] Tick failed: {e}", exc_info=True)
        await asyncio.sleep(interval)
