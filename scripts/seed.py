"""
Seed script - populates the database with demo data for development.

Usage:
    python -m scripts.seed

Creates contractors (with preferences and device tokens), a client, open
jobs to exercise matching, and assigned jobs without chat rooms to exercise
the reconciliation sweep.

This script is IDEMPOTENT - ids are derived from fixed names, and existing
rows are skipped.
"""
import asyncio
import sys
import os
import uuid

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from marketplace.core.database import async_session_maker, init_db
from marketplace.models.contractor_profile import ContractorProfile
from marketplace.models.job_posting import JobPosting, JOB_STATUS_OPEN, JOB_STATUS_ASSIGNED
from marketplace.models.notification import (
    UserDeviceToken,
    UserNotificationPreference,
    PLATFORM_ANDROID,
    PLATFORM_IOS,
)
from sqlalchemy import select


SEED_NAMESPACE = uuid.UUID("5b0a8f3e-7c1d-4e55-9a7b-2f0d6c3e9a10")


def seed_id(name: str) -> uuid.UUID:
    """Stable id for a seed row."""
    return uuid.uuid5(SEED_NAMESPACE, name)


CLIENT_USER_ID = seed_id("client:dev")

WEEKDAY_HOURS = {
    day: {"enabled": True, "start": "08:00", "end": "18:00"}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}


# ─── Contractors ───────────────────────────────────────────────

CONTRACTORS = [
    {
        "key": "amina",
        "full_name": "Amina Wanjiku",
        "bio": "Licensed electrician, residential and commercial rewiring.",
        "years_experience": 9,
        "average_rating": 4.8,
        "specialties": ["Electrical", "Solar Installation"],
        "service_areas": ["Nairobi", "Kiambu"],
        "working_hours": WEEKDAY_HOURS,
        "platform": PLATFORM_ANDROID,
        "quiet_hours": ("22:00:00", "06:00:00"),
    },
    {
        "key": "brian",
        "full_name": "Brian Otieno",
        "bio": "Plumbing repairs, water heaters and drainage.",
        "years_experience": 5,
        "average_rating": 4.3,
        "specialties": ["Plumbing"],
        "service_areas": ["Nairobi", "Machakos"],
        "working_hours": None,
        "platform": PLATFORM_IOS,
        "quiet_hours": None,
    },
    {
        "key": "carol",
        "full_name": "Carol Muthoni",
        "bio": "Interior painting and finishing.",
        "years_experience": 3,
        "average_rating": None,
        "specialties": [],
        "service_areas": [],
        # legacy matching fields only
        "region_text": "Mombasa",
        "specialty_tags": ["Painting"],
        "working_hours": None,
        "platform": PLATFORM_ANDROID,
        "quiet_hours": None,
    },
    {
        "key": "daniel",
        "full_name": "Daniel Kiprop",
        "bio": "Carpentry, custom cabinets and roofing.",
        "years_experience": 12,
        "average_rating": 4.9,
        "specialties": ["Carpentry", "Roofing"],
        "service_areas": ["Nakuru", "Nairobi"],
        "availability_status": "busy",
        "working_hours": WEEKDAY_HOURS,
        "platform": PLATFORM_IOS,
        "quiet_hours": None,
    },
]


# ─── Jobs ──────────────────────────────────────────────────────

JOBS = [
    {
        "key": "rewire-kitchen",
        "title": "Rewire kitchen circuits",
        "description": "Replace old wiring and add two sockets.",
        "location_text": "Nairobi",
        "compensation_range": "KES 15,000 - 25,000",
        "category_name": "Electrical",
        "required_skills": ["Electrical"],
        "status": JOB_STATUS_OPEN,
    },
    {
        "key": "fix-leak",
        "title": "Fix leaking bathroom pipe",
        "description": "Leak under the sink, needs same-week repair.",
        "location_text": "Machakos",
        "compensation_range": "KES 3,000 - 5,000",
        "category_name": "Plumbing",
        "required_skills": ["Plumbing"],
        "status": JOB_STATUS_OPEN,
    },
    {
        "key": "paint-lounge",
        "title": "Repaint living room",
        "description": "Two coats, walls and ceiling.",
        "location_text": "Mombasa",
        "compensation_range": "KES 10,000",
        "category_name": "Painting",
        "required_skills": ["Painting"],
        "status": JOB_STATUS_ASSIGNED,
        "contractor": "carol",
    },
    {
        "key": "roof-repair",
        "title": "Repair storm-damaged roof",
        "description": "Replace iron sheets on the east side.",
        "location_text": "Nakuru",
        "compensation_range": "KES 40,000 - 60,000",
        "category_name": "Roofing",
        "required_skills": ["Roofing"],
        "status": JOB_STATUS_ASSIGNED,
        "contractor": "daniel",
    },
]


async def seed():
    """Create tables and insert demo data."""
    print("Seeding database...")

    await init_db()
    print("  Tables created")

    async with async_session_maker() as db:
        # ─── Contractors, preferences, device tokens ───────────
        created = 0
        for spec in CONTRACTORS:
            profile_id = seed_id(f"contractor:{spec['key']}")
            user_id = seed_id(f"user:{spec['key']}")

            existing = await db.execute(select(ContractorProfile).where(ContractorProfile.id == profile_id))
            if existing.scalar_one_or_none():
                continue

            db.add(ContractorProfile(
                id=profile_id,
                user_id=user_id,
                full_name=spec["full_name"],
                bio=spec["bio"],
                years_experience=spec["years_experience"],
                average_rating=spec["average_rating"],
                specialties=spec["specialties"],
                service_areas=spec["service_areas"],
                region_text=spec.get("region_text"),
                specialty_tags=spec.get("specialty_tags", []),
                availability_status=spec.get("availability_status", "available"),
                working_hours=spec["working_hours"],
            ))

            quiet = spec["quiet_hours"]
            db.add(UserNotificationPreference(
                user_id=user_id,
                enable_new_job_notifications=True,
                enable_chat_notifications=True,
                quiet_hours_start=quiet[0] if quiet else None,
                quiet_hours_end=quiet[1] if quiet else None,
            ))
            db.add(UserDeviceToken(
                user_id=user_id,
                device_token=f"demo-token-{spec['key']}",
                platform=spec["platform"],
            ))
            created += 1

        await db.flush()
        print(f"  Created {created} contractors ({len(CONTRACTORS) - created} already existed)")

        # ─── Jobs ───────────────────────────────────────────────
        created = 0
        for spec in JOBS:
            job_id = seed_id(f"job:{spec['key']}")

            existing = await db.execute(select(JobPosting).where(JobPosting.id == job_id))
            if existing.scalar_one_or_none():
                continue

            contractor_key = spec.get("contractor")
            db.add(JobPosting(
                id=job_id,
                posted_by_user_id=CLIENT_USER_ID,
                title=spec["title"],
                description=spec["description"],
                location_text=spec["location_text"],
                compensation_range=spec["compensation_range"],
                category_name=spec["category_name"],
                required_skills=spec["required_skills"],
                status=spec["status"],
                selected_contractor_id=seed_id(f"contractor:{contractor_key}") if contractor_key else None,
            ))
            created += 1

        await db.commit()
        print(f"  Created {created} jobs ({len(JOBS) - created} already existed)")
        print()
        print("Seed complete!")
        print("  Assigned jobs without chat rooms: run `python -m scripts.reconcile_chat_rooms`")


if __name__ == "__main__":
    asyncio.run(seed())
