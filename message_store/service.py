"""
Service lifecycle: owns the database handle and the HTTP app.
"""
from typing import Optional

import uvicorn

from message_store.core.config import Settings, get_settings
from message_store.core.database import Database
from message_store.core.logging import get_logger, setup_logging
from message_store.core.migrations import run_migrations
from message_store.main import create_app

logger = get_logger(__name__)


class MessageStoreService:
    """
    The message store process.

    Typical startup is `migrate()` then `listen()`; `close()` releases the
    connection pool.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        setup_logging(self.settings)

        self.database = Database(self.settings.database_url, echo=self.settings.debug)
        self.app = create_app(self.settings, self.database)

    def migrate(self) -> bool:
        """
        Apply pending migrations.

        Failures are logged and swallowed so the process still starts;
        the readiness probe reports the stale schema. Returns True on success.
        """
        try:
            run_migrations(self.database.engine)
        except Exception:
            logger.exception("Database migration failed; continuing startup")
            return False
        return True

    def listen(self) -> None:
        """Serve HTTP on the configured host and port until interrupted."""
        logger.info(
            "Listening",
            extra={"extra_data": {"host": self.settings.host, "port": self.settings.port}}
        )
        try:
            uvicorn.run(
                self.app,
                host=self.settings.host,
                port=self.settings.port,
                log_config=None,
                access_log=False,
            )
        finally:
            self.close()

    def close(self) -> None:
        self.database.dispose()
