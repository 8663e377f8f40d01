"""Main entry point for the Orien chat backend."""

import asyncio
import logging
import signal
import sys
from typing import Any

from orien.agents import ChatAgent, WakeupAgent
from orien.config import Config, setup_logging
from orien.context import CacheBreakpointTracker, InMemoryBreakpointStore
from orien.database import Database
from orien.openrouter import OpenRouterClient
from orien.scheduler import BackgroundScheduler, PeriodicSchedule
from orien.server import OrienServer

logger = logging.getLogger(__name__)


class Orien:
    """Wires the store, model client, agents, scheduler and HTTP server together."""

    def __init__(self, config: Config):
        """Initialize the application with configuration."""
        self.config = config
        self.db = Database(config.db_path)
        self.db.create_tables()

        self.model_client = OpenRouterClient(
            api_url=config.openrouter_api_url,
            api_key=config.openrouter_api_key,
            db=self.db,
            max_retries=config.openrouter_max_retries,
            retry_delay=config.openrouter_retry_delay,
            timeout=config.openrouter_timeout,
            referer=config.app_referer,
            title=config.app_title,
        )

        self.chat_agent = ChatAgent(
            db=self.db,
            client=self.model_client,
            config=config,
            tracker=CacheBreakpointTracker(InMemoryBreakpointStore()),
        )
        self.wakeup_agent = WakeupAgent(db=self.db, client=self.model_client, config=config)

        self.scheduler = BackgroundScheduler(
            schedules=[PeriodicSchedule(self.wakeup_agent, config.wakeup_interval_seconds)],
            idle_threshold=config.idle_seconds,
            tick_interval=config.scheduler_tick_interval,
        )
        self.server = OrienServer(
            db=self.db,
            chat_agent=self.chat_agent,
            wakeup_agent=self.wakeup_agent,
            scheduler=self.scheduler,
        )

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum: int, frame: Any) -> None:
        """Handle shutdown signals."""
        logger.info("Received shutdown signal, stopping...")
        self.scheduler.stop()

    async def run(self) -> None:
        """Serve HTTP and run the wake-up scheduler until stopped."""
        logger.info("Starting Orien on %s:%d", self.config.host, self.config.port)
        await self.server.start(self.config.host, self.config.port)
        try:
            await self.scheduler.run()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Clean shutdown of resources."""
        logger.info("Shutting down...")
        self.scheduler.stop()
        await self.server.stop()
        await self.model_client.close()
        logger.info("Shutdown complete")


async def main() -> None:
    """Main entry point."""
    config = Config.load()
    setup_logging(config.log_level, config.log_file, config.log_max_bytes, config.log_backup_count)

    logger.info("Starting Orien with config:")
    logger.info("  openrouter_api_url: %s", config.openrouter_api_url)
    logger.info("  db_path: %s", config.db_path)
    logger.info("  idle_threshold: %.0fs", config.idle_seconds)
    logger.info("  wakeup_interval: %.0fs", config.wakeup_interval_seconds)

    app = Orien(config)
    await app.run()


def run() -> None:
    """Console-script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Orien stopped by user")
        sys.exit(0)


if __name__ == "__main__":
    run()
