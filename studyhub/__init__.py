"""
StudyHub — A Study-Notes Sharing Platform
==========================================
Students upload study notes, publish short posts, like and comment on
each other's content, and earn credits and achievements that rank them on
a public leaderboard.

Package layout::

    studyhub/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Upload limits, feed defaults
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session helpers
    │   └── models.py      # All ORM models
    ├── engine/
    │   └── ledger.py      # Credit awards + achievement rules (pure)
    ├── services/
    │   ├── ledger_service.py      # Notes, credits, achievements, rankings
    │   ├── engagement_service.py  # Like/unlike toggles + comments
    │   ├── content_service.py     # Posts + note/post feeds
    │   ├── user_service.py        # Accounts + password hashing
    │   ├── upload_service.py      # Note file storage
    │   └── reconciliation_service.py  # Counter / balance drift repair
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine, config, JWT dependencies
        ├── auth.py        # Register / login → JWT
        └── routes/        # Notes, posts, users, leaderboard
"""

__version__ = "0.1.0"
