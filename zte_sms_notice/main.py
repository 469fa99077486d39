"""Main entry point for the ZTE SMS notification agent."""

import argparse
import logging
import os
import sys
import threading
from typing import Optional

from .bark_notifier import BarkNotifier
from .config import AppConfig, load_config
from .exceptions import RouterError
from .ledger import NotifiedLedger
from .pipeline import run_cycle
from .router_client import RouterClient
from .scheduler import install_signal_handlers, run_periodically

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Forward unread SMS from a ZTE router to Bark push notifications"
    )
    parser.add_argument("-p", "--password", default=None,
                        help="Router admin password (overrides ZTE_PASSWORD)")
    parser.add_argument("-b", "--bark-keys", default=None,
                        help="Bark device keys, comma-separated (overrides BARK_KEYS)")
    parser.add_argument("-s", "--sound", default=None,
                        help="Bark sound name (overrides BARK_SOUND, default: healthnotification)")
    parser.add_argument("--url", default=None,
                        help="Router address (overrides ZTE_BASE_URL, default: http://192.168.0.1)")
    parser.add_argument("-i", "--interval", type=float, default=None,
                        help="Seconds between checks (overrides POLL_INTERVAL_SECONDS, default: 3)")
    parser.add_argument("--once", action="store_true",
                        help="Run a single check cycle and exit (for cron)")
    return parser


def _apply_args_to_env(args: argparse.Namespace) -> None:
    """Command-line flags take precedence over the environment."""
    overrides = {
        "ZTE_PASSWORD": args.password,
        "BARK_KEYS": args.bark_keys,
        "BARK_SOUND": args.sound,
        "ZTE_BASE_URL": args.url,
        "POLL_INTERVAL_SECONDS": None if args.interval is None else str(args.interval),
    }
    for key, value in overrides.items():
        if value is not None:
            os.environ[key] = value


def run(config: AppConfig, once: bool = False, stop_event: Optional[threading.Event] = None) -> int:
    """
    Log in, poll until stopped, then log out.

    Returns:
        Process exit code: 0 on a clean stop, 1 if the startup login failed.
    """
    client = RouterClient(config.router.base_url, timeout=config.router.timeout)
    notifier = BarkNotifier.from_config(config.bark)
    ledger = NotifiedLedger()

    logger.info("Starting ZTE SMS monitor...")
    logger.info(f"Router address: {client.base_url}")
    logger.info(f"Check interval: {config.scheduler.interval_seconds} seconds")

    try:
        client.login(config.router.password)
    except RouterError as e:
        logger.error(f"Login failed: {e}")
        return 1
    logger.info("Login successful")

    def cycle() -> None:
        run_cycle(
            client,
            notifier,
            ledger,
            page_size=config.router.page_size,
            mem_store=config.router.mem_store,
            title_template=config.notification.title_template,
        )

    try:
        if once:
            cycle()
        else:
            if stop_event is None:
                stop_event = threading.Event()
                install_signal_handlers(stop_event)
            run_periodically(cycle, config.scheduler.interval_seconds, stop_event)
    finally:
        try:
            client.logout()
            logger.info("Logged out")
        except RouterError as e:
            logger.warning(f"Logout failed: {e}")

    return 0


def main():
    """Main entry point with command-line argument parsing."""
    parser = build_parser()
    args = parser.parse_args()
    _apply_args_to_env(args)

    try:
        config = load_config()
    except ValueError as e:
        print(f"Error: {e}")
        parser.print_usage()
        sys.exit(1)

    sys.exit(run(config, once=args.once))


if __name__ == "__main__":
    main()
