import logging

from sqlalchemy_utils import database_exists, create_database

from .database_client import engine
from ..models.base import Base
from ..models import user, sql_product  # noqa: F401  (register tables on Base)

logger = logging.getLogger(__name__)

# python -m kiit_rentals.core.initialise_db to run this file directly
# Column/enum changes are not migrated; drop the table (and enum type on PostgreSQL) by hand
def initialize_db():
    """Checks if the DB exists, creates it if necessary, and ensures all tables are created."""
    try:
        if not database_exists(engine.url):
            print("Database not found. Creating database...")
            create_database(engine.url)

        print("Creating/Ensuring all tables exist...")
        Base.metadata.create_all(bind=engine)
        print("✓ Tables ready (users, products)")

    except Exception as e:
        logger.error(f"Error during database initialization: {e}")
        raise


if __name__ == "__main__":
    initialize_db()
