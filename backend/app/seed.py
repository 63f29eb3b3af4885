"""
Replace the catalogue with the sample products and articles.

Usage: python -m app.seed
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.database import SessionLocal, init_db
from app.models.article import Article
from app.models.product import Product

logger = logging.getLogger("app.seed")

PRODUCTS = [
    {
        "name": "Laptop Screen Replacement 15.6 inch",
        "description": "High-quality 15.6 inch laptop screen replacement panel. Compatible with most laptop brands including Dell, HP, Lenovo.",
        "category": "Electronics",
        "price": 3499,
    },
    {
        "name": "MongoDB Developer Handbook",
        "description": "A comprehensive guide for developers to master MongoDB database. Covers indexes, aggregation, and full-text search.",
        "category": "Books",
        "price": 799,
    },
    {
        "name": "Pro Laptop Stand for Desk",
        "description": "Sturdy aluminum laptop stand to raise your laptop screen to eye level. Reduces neck strain during long coding sessions.",
        "category": "Accessories",
        "price": 1200,
    },
    {
        "name": "Mechanical Keyboard for Developers",
        "description": "Full-size mechanical keyboard with RGB lighting. Perfect for developers and programmers. Bluetooth and USB support.",
        "category": "Electronics",
        "price": 4500,
    },
    {
        "name": "Node.js in Action - Book",
        "description": "Step-by-step guide to building server-side applications using Node.js and Express. Includes REST API and MongoDB integration.",
        "category": "Books",
        "price": 650,
    },
]

ARTICLES = [
    {
        "title": "How to Fix a Laptop Screen",
        "content": "A complete step-by-step guide to replacing a cracked or broken laptop screen at home. Learn how to identify compatible screen panels and safely replace them.",
        "author": "Rahul Sharma",
        "tags": ["laptop", "repair", "screen", "hardware"],
    },
    {
        "title": "Getting Started with MongoDB Full-Text Search",
        "content": "Learn how to implement full-text search in MongoDB using the $text operator and text indexes. Includes examples for single and multiple collection searches.",
        "author": "Priya Singh",
        "tags": ["mongodb", "full-text search", "database", "backend"],
    },
    {
        "title": "Building REST APIs with Node.js and Express",
        "content": "A complete tutorial on building production-ready REST APIs using Node.js, Express, and MongoDB. Covers routing, controllers, middleware, and error handling.",
        "author": "Amit Kumar",
        "tags": ["nodejs", "express", "api", "backend", "javascript"],
    },
    {
        "title": "Understanding MongoDB Text Indexes",
        "content": "An in-depth look at how MongoDB text indexes work, how to create them, and how to use them for efficient full-text searches across multiple fields.",
        "author": "Sneha Patel",
        "tags": ["mongodb", "indexes", "database", "performance"],
    },
    {
        "title": "Best Laptops for Developers in 2024",
        "content": "A curated list of the best laptops for software developers and programmers in 2024. Covers performance, battery life, screen quality, and value for money.",
        "author": "Vikram Mehta",
        "tags": ["laptop", "developer", "hardware", "review"],
    },
]


def seed(session_factory: sessionmaker = SessionLocal) -> dict:
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    with session_factory() as db:
        # Row-by-row deletes keep the FTS delete triggers firing.
        for row in db.query(Product).all() + db.query(Article).all():
            db.delete(row)

        for item in PRODUCTS:
            db.add(Product(id=str(uuid.uuid4()), created_at=now, updated_at=now, **item))
        for item in ARTICLES:
            db.add(Article(id=str(uuid.uuid4()), created_at=now, updated_at=now, **item))
        db.commit()

    return {"products": len(PRODUCTS), "articles": len(ARTICLES)}


def main():
    logging.basicConfig(level=logging.INFO)
    settings.data_path.mkdir(parents=True, exist_ok=True)
    init_db(settings.db_path)
    counts = seed()
    logger.info("Seeded %d products and %d articles into %s", counts["products"], counts["articles"], settings.db_path)


if __name__ == "__main__":
    main()
