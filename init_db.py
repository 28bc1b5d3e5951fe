"""
Database initialization script for PostgreSQL
Creates all tables and, with --seed, the sample services and states
"""
import argparse
import logging
from decimal import Decimal

from filemyrti_api.database import SessionLocal, init_db
from filemyrti_api.models.service import Service
from filemyrti_api.models.state import State

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_SERVICES = [
    {
        "name": "Seamless Online Filing",
        "slug": "seamless-online-filing",
        "description": "File RTI applications online easily with expert drafting, submission, and timely dispatch.",
        "price": Decimal("699.00"),
        "original_price": Decimal("4999.00"),
        "button_text": "File Now",
        "icon_text": "Seamless Online Filing",
    },
    {
        "name": "Anonymous RTI Filing",
        "slug": "anonymous",
        "description": "Protect your identity with our discreet service for filing RTI applications on your behalf.",
        "price": Decimal("699.00"),
        "original_price": Decimal("5999.00"),
        "button_text": "Start Anonymously",
        "icon_text": "ANONYMOUS RTI Filing",
    },
    {
        "name": "Online First Appeal Filing",
        "slug": "1st-appeal",
        "description": "File your First Appeal online with expert drafting, review, and quick submission.",
        "price": Decimal("699.00"),
        "original_price": Decimal("3999.00"),
        "button_text": "Appeal Now",
        "icon_text": "First Appeal",
    },
    {
        "name": "15 min RTI",
        "slug": "15-minute-consultation",
        "description": "Get personalized advice from legal experts to navigate complex RTI applications effectively.",
        "price": Decimal("199.00"),
        "original_price": Decimal("499.00"),
        "button_text": "Pay Now",
        "icon_text": "15-MIN TALK TO EXPERT",
    },
]

SAMPLE_STATES = [
    {"name": "Telangana", "slug": "telangana", "rti_portal_url": "https://rti.telangana.gov.in"},
    {"name": "Andhra Pradesh", "slug": "andhra-pradesh", "rti_portal_url": "https://rti.ap.gov.in"},
    {"name": "Maharashtra", "slug": "maharashtra", "rti_portal_url": "https://rti.maharashtra.gov.in"},
]


def seed_sample_data():
    """Insert sample services and states when the tables are empty"""
    db = SessionLocal()
    try:
        if db.query(Service).count() == 0:
            for service in SAMPLE_SERVICES:
                db.add(Service(**service))
                logger.info(f"✓ Created service: {service['name']}")
        else:
            logger.info("Services already exist, skipping...")

        if db.query(State).count() == 0:
            for state in SAMPLE_STATES:
                db.add(State(description=f"RTI filing services for {state['name']} state", **state))
                logger.info(f"✓ Created state: {state['name']}")
        else:
            logger.info("States already exist, skipping...")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create FileMyRTI tables")
    parser.add_argument("--seed", action="store_true", help="also insert sample services and states")
    args = parser.parse_args()

    try:
        logger.info("Creating all database tables...")
        init_db()
        logger.info("✓ Database tables created successfully!")

        if args.seed:
            seed_sample_data()

        logger.info("Database initialization complete!")
    except Exception as e:
        logger.error(f"✗ Error initializing database: {str(e)}")
        raise


if __name__ == "__main__":
    main()
