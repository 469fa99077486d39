"""ZTE router web API client: login handshake, AD token and SMS commands."""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import requests

from .exceptions import NotAuthorizedError, TransportError
from .models import MemStore, MessageTag, SessionState, SMSMessage
from .protocol import (
    GET_PATH,
    SET_PATH,
    build_query,
    derive_authorization_token,
    encode_id_list,
    parse_challenge,
    parse_command_result,
    parse_login_info,
    parse_login_result,
    parse_randomizer,
    parse_sms_list,
    parse_version_seeds,
    password_digest,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://192.168.0.1"
DEFAULT_TIMEOUT = 30


class RouterClient:
    """Client for one ZTE router (tested against the F50 Pro web UI protocol)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Router address, e.g. "http://192.168.0.1".
            timeout: Per-request timeout in seconds.
            session: Optional requests session (a new one is created otherwise).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()
        self.state = SessionState()

    def _request(self, method: str, path: str, **kwargs) -> str:
        """
        Send one HTTP request and return the response body.

        Raises:
            TransportError: On connection errors, timeouts and non-2xx statuses.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.Timeout as e:
            raise TransportError(f"{method} {path} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        return response.text

    def _get(self, params: Sequence[Tuple[str, object]]) -> str:
        query = build_query(list(params) + [("isTest", "false")])
        return self._request("GET", f"{GET_PATH}?{query}")

    def _get_multi(self, cmd: str) -> str:
        return self._get([("cmd", cmd), ("multi_data", 1)])

    def _post(self, goform_id: str, fields: Sequence[Tuple[str, str]] = ()) -> str:
        data = [("isTest", "false"), ("goformId", goform_id)] + list(fields)
        return self._request("POST", SET_PATH, data=data)

    def _require_token(self, command: str) -> str:
        if not self.state.token:
            raise NotAuthorizedError(f"{command} needs an AD token; login has not completed")
        return self.state.token

    def fetch_challenge(self) -> str:
        """Fetch the single-use LD value that salts the password digest."""
        return parse_challenge(self._get_multi("LD"))

    def fetch_randomizer(self) -> str:
        """Fetch RD and keep it in the session state."""
        randomizer = parse_randomizer(self._get_multi("RD"))
        self.state = replace(self.state, randomizer=randomizer)
        return randomizer

    def fetch_version_seeds(self) -> Tuple[str, str]:
        """Fetch (wa_inner_version, cr_version) and keep them in the session state."""
        seed0, seed1 = parse_version_seeds(self._get_multi("Language,cr_version,wa_inner_version"))
        self.state = replace(self.state, seed0=seed0, seed1=seed1)
        return seed0, seed1

    def derive_authorization_token(self) -> str:
        """AD for the current state; empty while seeds or RD are missing."""
        return derive_authorization_token(self.state.randomizer, self.state.seed0, self.state.seed1)

    def login(self, password: str) -> None:
        """
        Run the login handshake and derive the AD token.

        The previous state is discarded first. If a step after the router
        accepted the password fails, the state stays authenticated but
        without a token, so mutating calls keep failing fast.

        Raises:
            TransportError: If a request fails.
            AuthenticationError: If the router rejects the password.
            ProtocolError: If a response cannot be decoded.
        """
        self.state = SessionState()

        challenge = self.fetch_challenge()
        body = self._post("LOGIN", [("password", password_digest(password, challenge))])
        code = parse_login_result(body)
        logger.info(f"Router accepted login (result code {code})")

        self.state = SessionState(challenge=challenge, authenticated=True)
        self.fetch_version_seeds()
        self.fetch_randomizer()

        token = self.derive_authorization_token()
        if not token:
            logger.warning("Router returned empty version/RD values; AD token could not be derived")
        self.state = replace(self.state, token=token)

    def check_login(self) -> None:
        """
        Verify the router still considers the session logged in.

        Raises:
            SessionExpiredError: If loginfo is anything other than "ok".
            TransportError: If the request fails.
        """
        parse_login_info(self._get_multi("loginfo"))

    def logout(self) -> None:
        """Log out; does nothing when no AD token was ever derived."""
        if not self.state.token:
            return
        token = self.state.token
        self.state = SessionState()
        self._post("LOGOUT", [("AD", token)])

    def get_sms_list(
        self,
        page: int = 0,
        page_size: int = 50,
        tags: int = MessageTag.UNREAD,
        mem_store: int = MemStore.SIM,
    ) -> List[SMSMessage]:
        """
        Fetch one page of messages, newest first, with content decoded.

        Args:
            page: Zero-based page number.
            page_size: Messages per page.
            tags: MessageTag filter (1 = unread only).
            mem_store: MemStore to read from (1 = SIM).
        """
        body = self._get([
            ("cmd", "sms_data_total"),
            ("page", int(page)),
            ("data_per_page", int(page_size)),
            ("mem_store", int(mem_store)),
            ("tags", int(tags)),
            ("order_by", "order by id desc"),
        ])
        return parse_sms_list(body)

    def mark_as_read(self, ids: Sequence[str]) -> None:
        """
        Mark messages as read in a single SET_MSG_READ call.

        Raises:
            NotAuthorizedError: If no AD token is available (nothing is sent).
            CommandRejectedError: If the router does not answer "success".
        """
        token = self._require_token("SET_MSG_READ")
        if not ids:
            return
        body = self._post("SET_MSG_READ", [
            ("msg_id", encode_id_list(ids)),
            ("tag", "0"),
            ("AD", token),
        ])
        parse_command_result(body, "SET_MSG_READ")

    def delete_sms(self, ids: Sequence[str]) -> None:
        """
        Delete messages in a single DELETE_SMS call.

        Raises:
            NotAuthorizedError: If no AD token is available (nothing is sent).
            CommandRejectedError: If the router does not answer "success".
        """
        token = self._require_token("DELETE_SMS")
        if not ids:
            return
        body = self._post("DELETE_SMS", [
            ("msg_id", encode_id_list(ids)),
            ("notCallback", "true"),
            ("AD", token),
        ])
        parse_command_result(body, "DELETE_SMS")
