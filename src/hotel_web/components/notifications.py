"""Flash notifications queued on the session and shown on the next page."""

from hotel_shared.config import NOTIFICATION_AUTO_HIDE_MS
from hotel_shared.models.enums import Severity
from hotel_shared.services.session_store import Notification, Session

AUTO_HIDE_MS = NOTIFICATION_AUTO_HIDE_MS


def notify(session: Session, message: str, severity: Severity | str = Severity.INFO) -> Notification:
    """Queue a message for the next rendered page."""
    notification = Notification(message=message, severity=Severity(severity).value)
    session.notifications.append(notification)
    return notification


def pop_notifications(session: Session) -> list[Notification]:
    """Return queued messages and clear the queue."""
    pending = list(session.notifications)
    session.notifications.clear()
    return pending
