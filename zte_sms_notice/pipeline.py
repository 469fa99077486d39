"""One poll cycle: check session, fetch unread SMS, notify, mark as read."""

import logging
from typing import List

from .exceptions import RouterError
from .ledger import NotifiedLedger
from .models import MessageTag, SMSMessage
from .notifier import Notifier
from .router_client import RouterClient

logger = logging.getLogger(__name__)

DEFAULT_TITLE_TEMPLATE = "SMS from {number}"


def truncate(s: str, max_len: int) -> str:
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


def format_title(message: SMSMessage, template: str = DEFAULT_TITLE_TEMPLATE) -> str:
    """Notification title for a message; the template may use {number} and {date}."""
    return template.format(number=message.number, date=message.date)


def run_cycle(
    client: RouterClient,
    notifier: Notifier,
    ledger: NotifiedLedger,
    page_size: int = 50,
    mem_store: int = 1,
    title_template: str = DEFAULT_TITLE_TEMPLATE,
) -> None:
    """
    Run one check cycle. Never raises: failures are logged and the cycle
    ends early or skips the affected message.

    A message id enters the ledger right after its notification succeeded;
    a failed mark-as-read does not take it back out. Messages whose
    notification failed stay out of the ledger and are retried next cycle.
    """
    try:
        client.check_login()
    except RouterError as e:
        logger.warning(f"Login status check failed: {e}")
        return

    try:
        messages = client.get_sms_list(
            page=0, page_size=page_size, tags=MessageTag.UNREAD, mem_store=mem_store
        )
    except RouterError as e:
        logger.error(f"Failed to fetch SMS list: {e}")
        return

    if not messages:
        return

    logger.info(f"Found {len(messages)} unread SMS")

    notified: List[str] = []
    for msg in messages:
        if msg.id in ledger:
            continue

        try:
            notifier.send(format_title(msg, title_template), msg.content)
        except Exception as e:
            logger.error(f"Failed to send notification for SMS {msg.id}: {e}")
            continue

        logger.info(f"Notified: [{msg.number}] {truncate(msg.content, 30)}")
        ledger.add(msg.id)
        notified.append(msg.id)

    if not notified:
        return

    try:
        client.mark_as_read(notified)
    except RouterError as e:
        logger.error(f"Failed to mark {len(notified)} SMS as read: {e}")
    else:
        logger.info(f"Marked {len(notified)} SMS as read")
