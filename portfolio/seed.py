"""
Sample data for local development and demos.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy import delete
from sqlalchemy.orm import Session

from portfolio.models import Gear, Post, User
from portfolio.utils.passwords import hash_password

logger = logging.getLogger(__name__)

SAMPLE_USERS: list[dict[str, str]] = [
    {
        "username": "admin",
        "email": "admin@example.com",
        "password": "admin123",
        "role": "admin",
    },
]

SAMPLE_POSTS: list[dict[str, Any]] = [
    {
        "title": "Golden Hour in Santorini",
        "type": "photo",
        "category": "landscape",
        "story": (
            "The magic hour painted the white buildings in warm amber light. "
            "I waited three evenings for the perfect atmospheric conditions."
        ),
        "location": "Santorini, Greece",
        "date": date(2024, 8, 15),
        "time": "19:45",
        "camera": "Sony A7R IV",
        "lens": "24-70mm f/2.8 GM",
        "iso": "100",
        "aperture": "f/8",
        "shutter_speed": "1/125",
        "media_url": "https://images.unsplash.com/photo-1570077188670-e3a8d69ac5ff?w=800",
        "tags": ["sunset", "architecture", "travel", "greece"],
        "views": 245,
        "likes": 42,
        "featured": True,
    },
    {
        "title": "Wedding Vows",
        "type": "photo",
        "category": "events",
        "story": (
            "The bride's eyes welled up as her father walked her down the aisle. "
            "No amount of planning can create genuine feelings like this."
        ),
        "location": "Villa Rosa, Tuscany, Italy",
        "date": date(2024, 6, 20),
        "time": "16:30",
        "camera": "Canon EOS R5",
        "lens": "85mm f/1.2",
        "iso": "400",
        "aperture": "f/1.8",
        "shutter_speed": "1/200",
        "media_url": "https://images.unsplash.com/photo-1519741497674-611481863552?w=800",
        "tags": ["wedding", "emotion", "documentary", "italy"],
        "views": 189,
        "likes": 67,
    },
    {
        "title": "Urban Stories",
        "type": "video",
        "category": "commercial",
        "story": (
            "A 48-hour journey through Tokyo's hidden alleys, capturing the soul "
            "of the city through the eyes of local artisans."
        ),
        "location": "Tokyo, Japan",
        "date": date(2024, 9, 10),
        "time": "22:00",
        "camera": "Sony FX3",
        "lens": "35mm f/1.4",
        "iso": "3200",
        "aperture": "f/2",
        "shutter_speed": "1/50",
        "media_url": "https://images.unsplash.com/photo-1540959733332-eab4deabeeaf?w=800",
        "tags": ["cinematic", "street", "documentary", "japan"],
        "views": 512,
        "likes": 94,
        "featured": True,
    },
]

SAMPLE_GEAR: list[dict[str, Any]] = [
    {
        "name": "Sony A7R IV",
        "type": "camera",
        "brand": "Sony",
        "model": "ILCE-7RM4",
        "description": "61MP full-frame workhorse for landscapes and commercial work.",
        "specs": {"sensor": "Full Frame", "resolution": "61MP", "mount": "Sony E"},
    },
    {
        "name": "Leica Summilux 50mm f/1.4",
        "type": "lens",
        "brand": "Leica",
        "model": "Summilux-M 50mm f/1.4",
        "description": "Classic Leica glass with unique rendering.",
        "specs": {"focalLength": "50mm", "aperture": "f/1.4", "mount": "Leica M"},
    },
    {
        "name": "DJI Ronin RS3",
        "type": "accessory",
        "brand": "DJI",
        "model": "RS3",
        "description": "Gimbal stabilizer for smooth cinematic video work.",
        "specs": {"payload": "3kg", "battery": "12 hours", "modes": "3-axis"},
    },
]


def seed_database(db: Session) -> dict[str, int]:
    """
    Replace all users, posts and gear with the sample data.

    Seeded posts and gear reference external URLs, so they carry no media
    handle and deleting them never touches the storage backend.
    """
    db.execute(delete(User))
    db.execute(delete(Post))
    db.execute(delete(Gear))
    logger.info("Cleared existing users, posts and gear")

    for user in SAMPLE_USERS:
        db.add(
            User(
                username=user["username"],
                email=user["email"],
                password_hash=hash_password(user["password"]),
                role=user["role"],
            )
        )
    db.add_all(Post(**post) for post in SAMPLE_POSTS)
    db.add_all(Gear(**item) for item in SAMPLE_GEAR)
    db.commit()

    counts = {
        "users": len(SAMPLE_USERS),
        "posts": len(SAMPLE_POSTS),
        "gear": len(SAMPLE_GEAR),
    }
    logger.info("Seeded %s", counts)
    return counts
