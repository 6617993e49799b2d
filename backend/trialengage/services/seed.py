"""Demo Seed — the two showcase tenants and CereVasc's three trial sites.

Invariants:
    - Idempotent: existing companies are left untouched
    - Admin passwords are stored hashed
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.core.passwords import hash_password
from trialengage.models.company import Company
from trialengage.models.hospital import Hospital

logger = logging.getLogger(__name__)

DEMO_COMPANIES = [
    {
        "id": "cerevasc",
        "name": "CereVasc",
        "primary_color": "#1976d2",
        "logo_url": "/logos/cerevasc.png",
        "admin_username": "cerevasc_admin",
        "password": "CereVasc2024!",
        "settings": {"notifications": True, "auto_approval": False},
        "hospitals": [
            ("Massachusetts General Hospital", "Boston, MA", "Dr. Sarah Chen", 45, 32, 8.2),
            ("Johns Hopkins Hospital", "Baltimore, MD", "Dr. Michael Rodriguez", 38, 28, 7.1),
            ("Cleveland Clinic", "Cleveland, OH", "Dr. Jennifer Walsh", 32, 24, 6.8),
        ],
    },
    {
        "id": "medtronic",
        "name": "Medtronic",
        "primary_color": "#0066cc",
        "logo_url": "/logos/medtronic.png",
        "admin_username": "medtronic_admin",
        "password": "Medtronic2024!",
        "settings": {"notifications": True, "auto_approval": True},
        "hospitals": [],
    },
]


async def seed_demo_tenants(db: AsyncSession) -> list[str]:
    """Create missing demo tenants; returns the ids that were created."""
    created = []
    for demo in DEMO_COMPANIES:
        if await db.get(Company, demo["id"]):
            continue
        db.add(Company(
            id=demo["id"],
            name=demo["name"],
            primary_color=demo["primary_color"],
            logo_url=demo["logo_url"],
            admin_username=demo["admin_username"],
            admin_password_hash=hash_password(demo["password"]),
            settings=dict(demo["settings"]),
        ))
        await db.flush()
        for name, location, pi, consented, randomized, rate in demo["hospitals"]:
            db.add(Hospital(
                company_id=demo["id"],
                name=name,
                location=location,
                principal_investigator=pi,
                consented_patients=consented,
                randomized_patients=randomized,
                consent_rate=rate,
            ))
        created.append(demo["id"])
    await db.commit()
    if created:
        logger.info(f"Seeded demo tenants: {created}")
    return created
