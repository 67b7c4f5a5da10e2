#!/usr/bin/env python3
"""
Create the film catalog tables (and seed roles/admin), then print the schema.
For real schema changes use `flask --app film_catalog:create_app db migrate`.
"""
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from film_catalog import create_app
from film_catalog.extensions import db
from sqlalchemy import inspect


def create_tables():
    app = create_app()
    with app.app_context():
        print("Creating missing tables...")
        db.create_all()
        print("Tables created successfully!")

        inspector = inspect(db.engine)
        tables = inspector.get_table_names()
        print(f"Existing tables: {tables}")

        for table in ("user_watched", "reviews", "content_flags", "watchlists"):
            if table not in tables:
                print(f"  ! {table} is missing")
                continue
            print(f"{table} columns:")
            for col in inspector.get_columns(table):
                print(f"  - {col['name']}: {col['type']}")


if __name__ == "__main__":
    create_tables()
