"""
botlist — A Discord Bot Directory with a Moderation Workflow
=============================================================
Bot owners submit their bots for listing, moderators review and approve,
reject, feature, or delete them, and founders curate a partner directory.

Package layout::

    botlist/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Field allowlists, CDN/OAuth URL builders
    ├── errors.py          # Domain error taxonomy (mapped to HTTP statuses)
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   ├── models.py      # users / bots / bot_tags / partners
    │   └── seed.py        # Bootstrap admin seeder
    ├── engine/
    │   ├── cache.py       # TTL cache with an injectable clock
    │   ├── events.py      # Lifecycle notification envelope
    │   ├── permissions.py # Role-membership predicates
    │   ├── profile.py     # Enrichment → listing profile merge
    │   └── query.py       # Listing query normalization
    ├── services/
    │   ├── bot_service.py          # Submission / moderation lifecycle
    │   ├── listing_service.py      # Public paginated listing
    │   ├── partner_service.py      # Partner directory
    │   ├── permission_service.py   # Store-resolved authorization gate
    │   ├── enrichment_service.py   # Third-party bot metadata client
    │   ├── notification_service.py # Fire-and-forget webhook dispatcher
    │   └── embeds.py               # Discord embed builders
    └── api/
        ├── main.py        # FastAPI app
        ├── auth.py        # /auth/me
        └── routes/        # Public + admin REST endpoints
"""

__version__ = "0.1.0"
