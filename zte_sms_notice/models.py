"""Data models for the router session and SMS messages."""

from dataclasses import dataclass
from enum import IntEnum


class MessageTag(IntEnum):
    """Value of the `tags` filter on the SMS list endpoint."""
    ALL = 0
    UNREAD = 1
    READ = 2
    SENT = 3
    DRAFT = 4


class MemStore(IntEnum):
    """Where the router keeps the messages."""
    DEVICE = 0
    SIM = 1


@dataclass
class SMSMessage:
    """Represents one SMS as reported by the router."""
    id: str            # vendor-assigned, unique per message
    number: str        # originating number
    content: str       # decoded text (raw value if decoding failed)
    date: str          # vendor format, e.g. "24,10,19,15,42,07,+32"
    is_new: bool = False


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of the login handshake.

    Replaced as a whole at every step of `RouterClient.login`, never
    mutated in place. `token` stays empty until the version seeds and the
    randomizer were fetched after the router accepted the password.
    """
    challenge: str = ""    # LD
    randomizer: str = ""   # RD
    seed0: str = ""        # wa_inner_version
    seed1: str = ""        # cr_version
    token: str = ""        # AD
    authenticated: bool = False

    @property
    def ready(self) -> bool:
        """True once mutating calls may be sent."""
        return bool(self.token)
