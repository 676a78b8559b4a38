"""Run lightweight migrations and print the schema for verification.

Usage:
    python -m eventplanner.scripts.ensure_schema

This will build the Flask app (which creates missing tables and calls
ensure_schema()), then print the columns of the 'user' and 'event' tables.
"""
import logging

from sqlalchemy import inspect, text

from eventplanner.database import db

logger = logging.getLogger(__name__)

# Columns added after the first release, with the backfill for existing rows
_EVENT_COLUMNS = {
    'event_type': ("ALTER TABLE event ADD COLUMN event_type VARCHAR(20)",
                   "UPDATE event SET event_type = 'Others' WHERE event_type IS NULL"),
    'material': ("ALTER TABLE event ADD COLUMN material JSON",
                 "UPDATE event SET material = '[]' WHERE material IS NULL"),
}


def ensure_schema():
    """Create or upgrade database schema to the required version."""
    db.create_all()

    engine = db.engine
    columns = [col['name'] for col in inspect(engine).get_columns('event')]
    missing = [name for name in _EVENT_COLUMNS if name not in columns]
    if not missing:
        return []

    with engine.begin() as conn:
        for name in missing:
            add, backfill = _EVENT_COLUMNS[name]
            conn.execute(text(add))
            conn.execute(text(backfill))
            logger.warning("Added '%s' column to event table", name)
    return missing


if __name__ == '__main__':
    from eventplanner import create_app

    app = create_app()
    with app.app_context():
        inspector = inspect(db.engine)
        for table in ('user', 'event'):
            print(f'{table} table columns:')
            for col in inspector.get_columns(table):
                print(f"  {col['name']} {col['type']} nullable={col['nullable']}")
            print()
