"""
StreamSupervisor assembled from smaller mixins.

BaseState holds the configuration, the tracked encoder handle and the
shutdown event; the mixins add logging, encoder process control and the
restart state machine.
"""

from .base_state import BaseState
from .encoder_mixin import EncoderMixin
from .logging_mixin import LoggingMixin
from .watcher_mixin import WatcherMixin


class StreamSupervisor(
    BaseState,
    LoggingMixin,
    EncoderMixin,
    WatcherMixin,
):
    """Keeps one webcam (or fallback) broadcast alive indefinitely."""
