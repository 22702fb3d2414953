"""
Main entry point for the Twitch chat gateway
"""

import asyncio
import logging
import signal
import sys

import aiohttp
from dotenv import load_dotenv

from .api import MusicServiceClient, TokenClient
from .chat import SessionOrchestrator, WebSocketConnector
from .config import GatewayConfig, load_config
from .errors import ConfigurationError, ReconnectLimitExceeded
from .errors.handling import log_error
from .logging_config import LoggerConfigurator
from .logs.logger import logger
from .queue import InMemoryWorkQueue, WorkQueue


def _install_signal_handlers(orchestrator: SessionOrchestrator) -> None:  # pragma: no cover
    loop = asyncio.get_running_loop()

    def handler() -> None:
        if orchestrator.stopped:
            return
        logging.warning("🛑 SIGTERM received - initiating shutdown")
        orchestrator.stop()

    try:
        loop.add_signal_handler(signal.SIGTERM, handler)
    except (NotImplementedError, RuntimeError):
        # Platforms without loop signal support fall back to default handling
        pass


async def main(config: GatewayConfig, work_queue: WorkQueue | None = None) -> None:
    """Run the gateway until stopped or the reconnect limit is hit."""
    logger.log_event("app", "start")
    async with aiohttp.ClientSession() as session:
        orchestrator = SessionOrchestrator(
            config,
            WebSocketConnector(config.irc_url),
            TokenClient(
                session,
                config.client_id,
                config.client_secret,
                config.refresh_token,
                token_url=config.token_url,
                timeout=config.http_timeout,
            ),
            MusicServiceClient(session, config.web_uri, timeout=config.http_timeout),
            work_queue if work_queue is not None else InMemoryWorkQueue(),
        )
        _install_signal_handlers(orchestrator)
        try:
            await orchestrator.run()
        finally:
            logger.log_event("app", "shutdown")


def health_check() -> int:
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.log_event("app", "health_check_failed", level=logging.ERROR, error=str(e))
        return 1
    logger.log_event("app", "health_check_ok", bot_nick=config.bot_nick)
    return 0


def run(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    load_dotenv()
    LoggerConfigurator().configure()

    if args and args[0] == "--health-check":
        logging.info("🏥 Health check mode")
        sys.exit(health_check())

    try:
        config = load_config()
    except ConfigurationError as e:
        log_error("Configuration error", e)
        sys.exit(1)

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logging.info("⌨️ Application terminated by user")
        sys.exit(0)
    except ReconnectLimitExceeded as e:
        logging.critical(f"💀 {e}")
        sys.exit(1)
    except Exception as e:
        log_error("Top-level error", e)
        logging.critical(f"Critical error occurred: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
