"""Bark push notification module."""

import logging
from typing import Dict, List, Mapping, Optional
from urllib.parse import quote

import requests

from .config import BarkConfig
from .exceptions import NotificationError
from .notifier import Notifier

logger = logging.getLogger(__name__)


def _mask(key: str) -> str:
    return f"{key[:4]}..." if len(key) > 4 else key


class BarkNotifier(Notifier):
    """Sends notifications to one or more Bark device keys."""

    def __init__(
        self,
        keys: List[str],
        sound: str = "",
        server_url: str = "https://api.day.app",
        group: Optional[str] = None,
        use_post: bool = False,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.keys = keys
        self.sound = sound
        self.server_url = server_url.rstrip("/")
        self.group = group
        self.use_post = use_post
        self.timeout = timeout
        self.http = session or requests.Session()

    @classmethod
    def from_config(cls, config: BarkConfig) -> "BarkNotifier":
        return cls(
            keys=config.keys,
            sound=config.sound,
            server_url=config.server_url,
            group=config.group,
            use_post=config.use_post,
            timeout=config.timeout,
        )

    def _params(self, options: Optional[Mapping[str, str]]) -> Dict[str, str]:
        """Caller options first; configured sound and group fill the gaps."""
        params = dict(options or {})
        if self.sound and not params.get("sound"):
            params["sound"] = self.sound
        if self.group and not params.get("group"):
            params["group"] = self.group
        return params

    def send(self, title: str, body: str, options: Optional[Mapping[str, str]] = None) -> None:
        """
        Send to every configured key. Each key gets its own attempt.

        Raises:
            NotificationError: If no key is configured or any key failed.
        """
        keys = [key.strip() for key in self.keys if key and key.strip()]
        if not keys:
            raise NotificationError("No Bark key configured")

        failures = {}
        for key in keys:
            try:
                if self.use_post:
                    self.send_post(key, title, body, options)
                else:
                    self.send_to_device(key, title, body, options)
            except NotificationError as e:
                logger.error(f"Bark delivery to {_mask(key)} failed: {e}")
                failures[key] = str(e)

        if failures:
            raise NotificationError(
                f"Bark delivery failed for {len(failures)} of {len(keys)} key(s)",
                failures=failures,
            )

    def _check(self, response: requests.Response) -> None:
        if response.status_code != 200:
            raise NotificationError(f"Bark API returned status {response.status_code}: {response.text[:200]}")

    def send_to_device(
        self,
        key: str,
        title: str,
        body: str,
        options: Optional[Mapping[str, str]] = None,
    ) -> None:
        """GET {server}/{key}/{title}/{body}?sound=..."""
        url = f"{self.server_url}/{quote(key, safe='')}/{quote(title, safe='')}/{quote(body, safe='')}"
        try:
            response = self.http.get(url, params=self._params(options), timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"Bark request failed: {e}") from e
        self._check(response)
        logger.debug(f"Bark notification sent to {_mask(key)}")

    def send_post(
        self,
        key: str,
        title: str,
        body: str,
        options: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Form POST to {server}/{key}; suits long message bodies."""
        data = {"title": title, "body": body}
        data.update(self._params(options))
        try:
            response = self.http.post(f"{self.server_url}/{quote(key, safe='')}", data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"Bark request failed: {e}") from e
        self._check(response)
        logger.debug(f"Bark notification posted to {_mask(key)}")
