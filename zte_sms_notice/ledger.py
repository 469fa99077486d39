"""In-memory record of message ids already pushed to the notifier."""

from typing import Iterator, Set


class NotifiedLedger:
    """
    Set of notified message ids for the lifetime of the process.

    Ids are only ever added. Nothing is persisted: after a restart every
    message the router still reports as unread is notified again.
    """

    def __init__(self):
        self._ids: Set[str] = set()

    def __contains__(self, msg_id: str) -> bool:
        return msg_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def add(self, msg_id: str) -> None:
        self._ids.add(msg_id)
