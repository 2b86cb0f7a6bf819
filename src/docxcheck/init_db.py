"""Create the database schema without running migrations."""

from docxcheck.core.settings import settings
from docxcheck.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    init_db()
    print(f"Database initialized at {settings.database_url}.")
