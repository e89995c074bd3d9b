"""
Conflict notifications using Apprise.

Notification URLs (chat bots, email, etc.) live in a credential file, one per
line. The feature is only enabled when that file is present.
"""
import logging
import time
from pathlib import Path
from typing import Callable, Optional

import apprise

from tooclose.core.exceptions import CredentialFileError
from tooclose.core.timestamps import format_ctime
from tooclose.models import ConflictReport

logger = logging.getLogger(__name__)


def load_notification_urls(path: str) -> list[str]:
    """Read notification URLs from a credential file, skipping comments."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise CredentialFileError(str(file_path))

    urls = []
    for line in file_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            urls.append(line)

    if not urls:
        raise CredentialFileError(str(file_path), "has no notification URLs")
    return urls


class NotificationManager:
    """Sends conflict alerts via Apprise with a per-pair cooldown."""

    def __init__(
        self,
        urls: list[str],
        cooldown: int = 300,
        clock: Callable[[], float] = time.time,
    ):
        self.apprise = apprise.Apprise()
        for url in urls:
            self.apprise.add(url)
        self.cooldown = cooldown
        self._clock = clock
        self._last_sent: dict[str, float] = {}

    @classmethod
    def from_credentials(cls, path: str, cooldown: int = 300) -> "NotificationManager":
        return cls(load_notification_urls(path), cooldown=cooldown)

    def can_notify(self, key: str) -> bool:
        """Check if notification can be sent (respects cooldown)."""
        last_sent = self._last_sent.get(key)
        return last_sent is None or (self._clock() - last_sent) > self.cooldown

    def notify_conflict(self, report: ConflictReport) -> bool:
        key = report.pair_key
        if not self.can_notify(key):
            logger.debug(f"Notification for {key} suppressed by cooldown")
            return False

        a, b = report.aircraft_a, report.aircraft_b
        title = f"Close approach: {a.display_callsign} / {b.display_callsign}"
        body = (
            f"{a.hex_id} {a.display_callsign} {a.altitude}ft and "
            f"{b.hex_id} {b.display_callsign} {b.altitude}ft: "
            f"{report.horizontal_nm:.3f} NM horizontal, {report.vertical_ft} ft vertical "
            f"at {format_ctime(report.detected_at)}"
        )

        try:
            sent = self.apprise.notify(title=title, body=body, notify_type=apprise.NotifyType.WARNING)
        except Exception as e:
            logger.error(f"Notification for {key} failed: {e}")
            return False

        if sent:
            self._last_sent[key] = self._clock()
        else:
            logger.warning(f"Notification for {key} was not delivered")
        return bool(sent)
