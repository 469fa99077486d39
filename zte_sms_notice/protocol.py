"""Pure helpers for the ZTE goform web API: hash chains and response decoding."""

import base64
import hashlib
import json
import logging
from typing import Any, Dict, List, Sequence, Tuple
from urllib.parse import urlencode

from .exceptions import (
    AuthenticationError,
    CommandRejectedError,
    ProtocolError,
    SessionExpiredError,
)
from .models import MessageTag, SMSMessage

logger = logging.getLogger(__name__)

GET_PATH = "/goform/goform_get_cmd_process"
SET_PATH = "/goform/goform_set_cmd_process"

ID_DELIMITER = ";"

# LOGIN result codes
LOGIN_OK = 0
LOGIN_ALREADY_LOGGED_IN = 4
LOGIN_SUCCESS_CODES = (LOGIN_OK, LOGIN_ALREADY_LOGGED_IN)
LOGIN_ERROR_MESSAGES = {
    1: "wrong password",
    5: "logged in elsewhere or account locked",
}


def sha256_hex(value: str) -> str:
    """Lower-case hex SHA-256 of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def password_digest(password: str, challenge: str) -> str:
    """
    Hash the password for the LOGIN command.

    upper(sha256(upper(sha256(password)) + LD))
    """
    inner = sha256_hex(password).upper()
    return sha256_hex(inner + challenge).upper()


def derive_authorization_token(randomizer: str, seed0: str, seed1: str) -> str:
    """
    Derive the AD token sent with every mutating request.

    sha256(sha256(seed0 + seed1) + RD), lower-case hex. Returns an empty
    string while any input is still missing.
    """
    if not randomizer or not seed0 or not seed1:
        return ""
    return sha256_hex(sha256_hex(seed0 + seed1) + randomizer)


def build_query(params: Sequence[Tuple[str, Any]]) -> str:
    """Encode query parameters the way the router's web UI does (literal commas, '+' for spaces)."""
    return urlencode(list(params), safe=",")


def encode_id_list(ids: Sequence[str]) -> str:
    """Join message ids with a trailing delimiter: ["1", "2"] -> "1;2;"."""
    return "".join(f"{msg_id}{ID_DELIMITER}" for msg_id in ids)


def decode_content(raw: str) -> str:
    """
    Decode base64 message content.

    Falls back to the raw value when it is not valid base64 or not UTF-8,
    so a message is never dropped because of its encoding.
    """
    try:
        return base64.b64decode(raw, validate=True).decode("utf-8")
    except ValueError as e:  # binascii.Error, UnicodeDecodeError, non-ASCII input
        logger.debug(f"Content is not base64/UTF-8 ({e}); using raw value")
        return raw


def decode_flat_mapping(body: str) -> Dict[str, Any]:
    """Parse a response body that must be a JSON object."""
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ProtocolError(f"Response is not valid JSON: {body[:80]!r}") from e
    if not isinstance(data, dict):
        raise ProtocolError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def require_field(data: Dict[str, Any], key: str) -> str:
    """Return a required field as a string, or raise ProtocolError."""
    if key not in data or data[key] is None:
        raise ProtocolError(f"Response is missing required field '{key}'")
    return str(data[key])


def parse_challenge(body: str) -> str:
    return require_field(decode_flat_mapping(body), "LD")


def parse_randomizer(body: str) -> str:
    return require_field(decode_flat_mapping(body), "RD")


def parse_version_seeds(body: str) -> Tuple[str, str]:
    """Return (seed0, seed1) = (wa_inner_version, cr_version)."""
    data = decode_flat_mapping(body)
    return require_field(data, "wa_inner_version"), require_field(data, "cr_version")


def parse_login_result(body: str) -> int:
    """
    Interpret the LOGIN response.

    Codes 0 and 4 are success and returned; any other code raises
    AuthenticationError.
    """
    raw = require_field(decode_flat_mapping(body), "result")
    try:
        code = int(raw)
    except ValueError as e:
        raise ProtocolError(f"Login result is not a number: {raw!r}") from e

    if code not in LOGIN_SUCCESS_CODES:
        reason = LOGIN_ERROR_MESSAGES.get(code, "unknown error")
        raise AuthenticationError(f"Login rejected with code {code} ({reason})", code=code)
    return code


def parse_login_info(body: str) -> None:
    """Raise SessionExpiredError unless loginfo is exactly "ok"."""
    try:
        data = decode_flat_mapping(body)
    except ProtocolError as e:
        raise SessionExpiredError(f"Unreadable login status: {e}") from e

    status = data.get("loginfo")
    if status != "ok":
        raise SessionExpiredError(f"Not logged in or session expired (loginfo={status!r})")


def parse_command_result(body: str, command: str) -> None:
    """Raise CommandRejectedError unless the set command reported "success"."""
    result = require_field(decode_flat_mapping(body), "result")
    if result != "success":
        raise CommandRejectedError(f"{command} failed: {result}", result=result)


def optional_field(data: Dict[str, Any], key: str) -> str:
    """Return a field as a string; absent or null becomes ""."""
    value = data.get(key)
    return "" if value is None else str(value)


def parse_sms_list(body: str) -> List[SMSMessage]:
    """
    Normalize the sms_data_total response into SMSMessage objects, decoding content.

    Entries that are not objects or carry no id are logged and skipped so
    the rest of the page is still delivered.
    """
    data = decode_flat_mapping(body)
    if "messages" not in data:
        raise ProtocolError("Response is missing required field 'messages'")

    entries = data["messages"]
    if not isinstance(entries, list):
        raise ProtocolError(f"'messages' is not a list: {type(entries).__name__}")

    messages = []
    for entry in entries:
        try:
            if not isinstance(entry, dict):
                raise ProtocolError(f"Message entry is not an object: {entry!r}")
            msg_id = require_field(entry, "id")
        except ProtocolError as e:
            logger.warning(f"Skipping malformed SMS entry: {e}")
            continue

        messages.append(SMSMessage(
            id=msg_id,
            number=optional_field(entry, "number"),
            content=decode_content(optional_field(entry, "content")),
            date=optional_field(entry, "date"),
            is_new=optional_field(entry, "tag") == str(MessageTag.UNREAD.value),
        ))
    return messages
