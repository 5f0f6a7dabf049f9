"""Database module for SQLite persistence.

Provides:
- Database handle (connection management, schema initialization)
- Repository functions for learners, attendance, lesson results and lessons
"""

from hobbyu.db.database import Database, init_db

__all__ = ["Database", "init_db"]
