"""Sample content for development.

``seed(conn)`` wipes both tables and creates a "Blog Posts" and a "Products"
collection with a handful of entries.  Everything goes through the stores, so
the sample data is validated exactly like API input.
"""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog

from cms.db.collections import create_collection
from cms.db.entries import create_entry

logger = structlog.get_logger(__name__)

BLOG_FIELDS: list[dict[str, Any]] = [
    {"name": "title", "type": "string", "required": True, "label": "Title", "maxLength": 200},
    {"name": "body", "type": "markdown", "required": True, "label": "Body"},
    {
        "name": "category",
        "type": "select",
        "required": True,
        "label": "Category",
        "options": ["tech", "news", "tutorial", "opinion"],
    },
    {"name": "is_featured", "type": "boolean", "required": False, "label": "Featured", "default": False},
    {"name": "publish_date", "type": "date", "required": False, "label": "Publish Date"},
]

PRODUCT_FIELDS: list[dict[str, Any]] = [
    {"name": "name", "type": "string", "required": True, "label": "Product Name", "maxLength": 150},
    {"name": "description", "type": "markdown", "required": True, "label": "Description"},
    {"name": "price", "type": "number", "required": True, "label": "Price", "min": 0},
    {"name": "in_stock", "type": "boolean", "required": False, "label": "In Stock", "default": True},
    {
        "name": "category",
        "type": "select",
        "required": True,
        "label": "Category",
        "options": ["electronics", "software", "accessories", "services"],
    },
]

BLOG_POSTS: list[tuple[dict[str, Any], str]] = [
    (
        {
            "title": "Getting Started with Dynamic CMS",
            "body": (
                "# Getting Started with Dynamic CMS\n\n"
                "Create a collection, define its fields, and every entry you add "
                "is served from `/api/content/<slug>` straight away.\n\n"
                "> The database IS the API schema. No server restart needed!"
            ),
            "category": "tutorial",
            "is_featured": True,
            "publish_date": "2025-01-15",
        },
        "published",
    ),
    (
        {
            "title": "Why Headless CMS is the Future",
            "body": (
                "# Why Headless CMS is the Future\n\n"
                "Separating content management from presentation lets one "
                "content source feed any number of frontends."
            ),
            "category": "opinion",
            "is_featured": False,
            "publish_date": "2025-02-01",
        },
        "published",
    ),
    (
        {
            "title": "Filtering and Paging the Content API",
            "body": (
                "# Filtering and Paging the Content API\n\n"
                "Use `filter.<field>=value`, `sort=-updated_at`, `page` and "
                "`per_page` to shape list responses."
            ),
            "category": "tech",
            "is_featured": True,
            "publish_date": "2025-01-20",
        },
        "published",
    ),
    (
        {
            "title": "Upcoming Features (Draft)",
            "body": "# Upcoming Features\n\n- [ ] Media uploads\n- [ ] Webhooks",
            "category": "news",
            "is_featured": False,
            "publish_date": "",
        },
        "draft",
    ),
]

PRODUCTS: list[tuple[dict[str, Any], str]] = [
    (
        {
            "name": "CMS Pro License",
            "description": "# CMS Pro License\n\nUnlimited collections and entries.",
            "price": 49.99,
            "in_stock": True,
            "category": "software",
        },
        "published",
    ),
    (
        {
            "name": "Developer Keyboard",
            "description": "# Developer Keyboard\n\nMechanical switches, programmable layers.",
            "price": 129,
            "in_stock": False,
            "category": "accessories",
        },
        "published",
    ),
    (
        {
            "name": "Content Migration Service",
            "description": "# Content Migration Service\n\nWe move your legacy content for you.",
            "price": 999,
            "category": "services",
        },
        "draft",
    ),
]


def seed(conn: sqlite3.Connection) -> dict[str, int]:
    """Replace all content with the sample collections.

    Returns:
        ``{collection_slug: entries_created}``.
    """
    with conn:
        conn.execute("DELETE FROM entries")
        conn.execute("DELETE FROM collections")

    counts: dict[str, int] = {}
    for name, description, fields, entries in (
        ("Blog Posts", "Company blog with news and tutorials", BLOG_FIELDS, BLOG_POSTS),
        ("Products", "Product catalog with pricing and details", PRODUCT_FIELDS, PRODUCTS),
    ):
        collection = create_collection(conn, name, description=description, fields=fields)
        for data, status in entries:
            create_entry(conn, collection, data=data, status=status)
        counts[collection.slug] = len(entries)

    logger.info("database_seeded", counts=counts)
    return counts
