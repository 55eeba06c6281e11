"""
Immigration Tracker
Deadline tracking and document compliance for international students (OPT/H1B).

Architecture:
- Deployment profiles pick the database: SQLite (dev), PostgreSQL (prod),
  in-memory SQLite (test)
- Deadline rules computed from key dates (program end, OPT start/expiry)
"""

__version__ = "1.0.0"
