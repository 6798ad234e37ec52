"""
Reconcile chat rooms - create missing general rooms for assigned jobs.

Usage:
    python -m scripts.reconcile_chat_rooms

Same sweep the Celery beat schedule runs hourly. Exits non-zero when any
job failed.
"""
import asyncio
import sys
import os

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from marketplace.core.database import async_session_maker, close_db
from marketplace.core.logging import setup_logging
from marketplace.services.chat_service import ChatService


async def reconcile() -> int:
    setup_logging()
    service = ChatService()

    try:
        async with async_session_maker() as db:
            result = await service.reconcile_assigned_jobs(db)
    finally:
        await close_db()

    print(f"Checked {result.checked} assigned jobs")
    print(f"  Created:  {result.created}")
    print(f"  Existing: {result.existing}")
    print(f"  Errors:   {len(result.errors)}")
    for error in result.errors:
        print(f"    - job {error.job_id}: {error.error}")

    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(reconcile()))
