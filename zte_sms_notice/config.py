"""Configuration management."""

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class RouterConfig:
    """ZTE router web API configuration."""
    base_url: str
    password: str
    timeout: float = 30      # seconds per request
    page_size: int = 50      # messages fetched per cycle
    mem_store: int = 1       # 0 = device, 1 = SIM card


@dataclass
class BarkConfig:
    """Bark push relay configuration."""
    keys: List[str]          # one key per receiving device
    sound: str
    server_url: str = "https://api.day.app"
    group: Optional[str] = None
    use_post: bool = False   # POST form instead of URL path (long bodies)
    timeout: float = 30


@dataclass
class SchedulerConfig:
    """Scheduler configuration."""
    interval_seconds: float


@dataclass
class NotificationConfig:
    """Notification formatting configuration."""
    title_template: str = "SMS from {number}"


@dataclass
class AppConfig:
    """Complete application configuration."""
    router: RouterConfig
    bark: BarkConfig
    scheduler: SchedulerConfig
    notification: NotificationConfig


def _parse_list_env(key: str, default: List[str]) -> List[str]:
    """Parse comma-separated list from environment variable."""
    value = os.getenv(key, "")
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.

    Raises:
        ValueError: If required configuration values are missing or invalid.
    """
    # Router
    password = os.getenv("ZTE_PASSWORD")
    base_url = os.getenv("ZTE_BASE_URL", "http://192.168.0.1")
    timeout = _positive("ZTE_TIMEOUT", float(os.getenv("ZTE_TIMEOUT", "30")))
    page_size = int(_positive("ZTE_PAGE_SIZE", int(os.getenv("ZTE_PAGE_SIZE", "50"))))
    mem_store = int(os.getenv("ZTE_MEM_STORE", "1"))
    if mem_store not in (0, 1):
        raise ValueError(f"ZTE_MEM_STORE must be 0 (device) or 1 (SIM), got {mem_store}")

    # Bark
    bark_keys = _parse_list_env("BARK_KEYS", [])
    bark_sound = os.getenv("BARK_SOUND", "healthnotification")
    bark_server = os.getenv("BARK_SERVER", "https://api.day.app")
    bark_group = os.getenv("BARK_GROUP") or None
    bark_use_post = os.getenv("BARK_USE_POST", "false").lower() == "true"

    # Scheduler
    interval = _positive("POLL_INTERVAL_SECONDS", float(os.getenv("POLL_INTERVAL_SECONDS", "3")))

    title_template = os.getenv("TITLE_TEMPLATE", "SMS from {number}")
    try:
        title_template.format(number="", date="")
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(
            f"TITLE_TEMPLATE {title_template!r} is invalid; only {{number}} and {{date}} are available ({e!r})"
        ) from e

    # Validate required fields
    missing = []
    if not password:
        missing.append("ZTE_PASSWORD")
    if not bark_keys:
        missing.append("BARK_KEYS")

    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return AppConfig(
        router=RouterConfig(
            base_url=base_url,
            password=password,
            timeout=timeout,
            page_size=page_size,
            mem_store=mem_store,
        ),
        bark=BarkConfig(
            keys=bark_keys,
            sound=bark_sound,
            server_url=bark_server,
            group=bark_group,
            use_post=bark_use_post,
            timeout=timeout,
        ),
        scheduler=SchedulerConfig(
            interval_seconds=interval,
        ),
        notification=NotificationConfig(
            title_template=title_template,
        ),
    )
