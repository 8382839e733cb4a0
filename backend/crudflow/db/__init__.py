"""Database Schema — declarative Base, naming convention and shared column mixins.

Design Decisions:
    - Engine and sessions live in infrastructure/database.py; this package only
      describes tables, so Alembic can import it without opening connections
"""
