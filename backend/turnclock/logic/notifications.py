"""Side-effect hooks the turn clock fires for audio/haptic feedback."""

from typing import Protocol

from turnclock.logic.types import Player


class NotificationSink(Protocol):
    """Receiver for alert triggers. Hosts map these to sounds or vibration."""

    def notify_low_time(self, seconds_left: int) -> None:
        """Called on every tick that leaves the turn within the low-time window."""

    def notify_turn_expired(self, player: Player) -> None:
        """Called once when ``player``'s turn runs out (never on a manual advance)."""

    def notify_game_started(self) -> None:
        """Called when the clock leaves setup."""


class SilentNotificationSink:
    def notify_low_time(self, seconds_left: int) -> None:
        pass

    def notify_turn_expired(self, player: Player) -> None:
        pass

    def notify_game_started(self) -> None:
        pass
