from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from reclaim_api.core.config import Settings
from reclaim_api.repositories import materials as materials_repo
from reclaim_api.repositories import users as users_repo
from reclaim_api.schemas.material import MaterialPayload
from reclaim_api.services import materials as materials_service
from reclaim_api.services import users as users_service

logger = logging.getLogger("reclaim_api.services.seed")

DEV_ADMIN_EMAIL = "admin@example.com"
DEV_ADMIN_PASSWORD = "admin123"
DEV_USER_EMAIL = "user@example.com"
DEV_USER_PASSWORD = "user123"

DEMO_MATERIALS = [
    (5, {
        "name": "Corner Office Desk",
        "category": "Furniture",
        "materialType": "DESK",
        "condition": "Reusable",
        "color": "Oak",
        "notes": "Slightly scratched on the right side, otherwise in good condition",
        "width": 160,
        "height": 75,
        "depth": 80,
        "deskType": "CORNER_DESK",
        "heightAdjustable": True,
        "maximumHeight": 120,
    }),
    (10, {
        "name": "Mobile Drawer Unit",
        "category": "Storage",
        "materialType": "DRAWER_UNIT",
        "condition": "Reusable",
        "color": "Black",
        "notes": "Includes 3 drawers for storage",
        "width": 60,
        "height": 75,
        "depth": 45,
        "hasWheels": True,
    }),
    (15, {
        "name": "Double Glazed Window",
        "category": "Windows",
        "materialType": "WINDOW",
        "condition": "Reusable",
        "color": "White",
        "notes": "Complete with frame and hardware",
        "width": 120,
        "height": 150,
        "depth": 10,
        "openingType": "SIDE_HUNG",
        "hingeSide": "RIGHT",
        "uValue": 1.2,
    }),
    (20, {
        "name": "Solid Oak Door",
        "category": "Doors",
        "materialType": "DOOR",
        "condition": "Repairable",
        "color": "Natural Oak",
        "notes": "Needs new hinges",
        "width": 90,
        "height": 210,
        "depth": 4,
        "swingDirection": "LEFT",
    }),
    (45, {
        "name": "Steel Filing Cabinet",
        "category": "Storage",
        "materialType": "OFFICE_CABINET",
        "condition": "Damaged",
        "color": "Grey",
        "notes": "Dented side panel",
        "width": 80,
        "height": 180,
        "depth": 40,
        "openingType": "DOORS",
    }),
]


def seed_users(db: Session, settings: Settings) -> None:
    """Create the first admin account when the users table is empty.

    Dev mode falls back to well-known demo credentials and also adds a
    regular user; otherwise both ADMIN_EMAIL and ADMIN_PASSWORD are needed.
    """
    if users_repo.count_users(db) != 0:
        return

    if settings.dev_mode:
        email = settings.admin_email or DEV_ADMIN_EMAIL
        password = settings.admin_password or DEV_ADMIN_PASSWORD
    else:
        if not settings.admin_email and not settings.admin_password:
            return
        if not settings.admin_email:
            raise RuntimeError("ADMIN_EMAIL must be set to seed admin when DEV_MODE=false.")
        if not settings.admin_password:
            raise RuntimeError("ADMIN_PASSWORD must be set to seed admin when DEV_MODE=false.")
        email = settings.admin_email
        password = settings.admin_password

    try:
        users_service.create_user(db, email, password, name="Admin User", roles=users_service.ADMIN_ROLES)
        if settings.dev_mode:
            users_service.create_user(db, DEV_USER_EMAIL, DEV_USER_PASSWORD, name="Test User")
    except ValueError as exc:
        raise RuntimeError(f"Failed to seed admin user: {exc}") from exc
    logger.info("Seeded admin user %s", email)


def seed_demo_materials(db: Session) -> int:
    if materials_repo.count_materials(db) != 0:
        return 0
    now = datetime.utcnow()
    for days_ago, payload in DEMO_MATERIALS:
        material = materials_service.create_material(
            db,
            MaterialPayload.model_validate(payload),
            details="Demo data",
        )
        material.date_added = now - timedelta(days=days_ago)
        materials_repo.save_material(db, material)
    logger.info("Seeded %s demo materials", len(DEMO_MATERIALS))
    return len(DEMO_MATERIALS)
