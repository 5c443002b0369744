"""Enumerations shared by the endpoint client."""

from enum import Enum


class LogLevel(str, Enum):
    """Log levels accepted by the log API.

    EVENT entries are used to build custom event analytics.
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"
    EVENT = "EVENT"


class NotificationType(str, Enum):
    """Notification layouts supported by the push notification API."""

    TILE_WITH_TEXT = "tile-text"
    TILE_WITH_IMAGE_AND_TEXT = "tile-image-text"
    TOAST_WITH_TEXT = "toast-text-01"
    TOAST_WITH_TEXT_AND_SUBTITLE = "toast-text-02"
    TOAST_WITH_IMAGE_AND_TEXT = "toast-image-text-02"
