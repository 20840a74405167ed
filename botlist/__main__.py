"""
botlist.__main__ — Entry point for ``python -m botlist``
=========================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings).
3. Create the SQLAlchemy engine, ensure tables exist, seed bootstrap admins.
4. Serve the FastAPI app with uvicorn (blocking).
"""

from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

from botlist.config import load_config
from botlist.database.engine import create_db_engine, init_db

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("botlist")


def main() -> None:
    """Bootstrap the database and run the API."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Soft configuration.
    cfg = load_config(os.getenv("BOTLIST_CONFIG", "config.yaml"))
    logger.info("Config loaded — Site: %s", cfg.site_name)

    # 3. Database.
    engine = create_db_engine()
    init_db(engine, cfg.bootstrap_admin_ids)
    engine.dispose()

    if not os.getenv("NOTIFY_WEBHOOK_URL"):
        logger.warning("NOTIFY_WEBHOOK_URL is not set — lifecycle notifications are disabled.")

    # 4. API (blocks until Ctrl+C or SIGTERM).
    from botlist.api.main import app

    logger.info("Starting botlist API on port %d…", cfg.api_port)
    uvicorn.run(app, host="0.0.0.0", port=cfg.api_port, log_config=None)


if __name__ == "__main__":
    main()
