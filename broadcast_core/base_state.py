import subprocess
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import config
from .errors import BroadcastError
from .run_config import RunConfiguration


class StreamState(Enum):
    STARTING_PRIMARY = "starting_primary"
    RUNNING_PRIMARY = "running_primary"
    STARTING_FALLBACK = "starting_fallback"
    RUNNING_FALLBACK = "running_fallback"
    BACKOFF = "backoff"
    SHUTTING_DOWN = "shutting_down"


@dataclass(frozen=True)
class StreamProcessHandle:
    proc: subprocess.Popen
    # wall-clock time.time() when this encoder instance was launched
    started_at: float
    # "primary" or "fallback"
    mode: str

    @property
    def pid(self) -> int:
        return self.proc.pid


class BaseState:
    def __init__(self, cfg: RunConfiguration) -> None:
        self.config = cfg

        self.state: StreamState = StreamState.STARTING_PRIMARY
        # the single running encoder, replaced on every (re)start
        self.handle: Optional[StreamProcessHandle] = None
        self.last_error: Optional[BroadcastError] = None

        # timings (seconds); tests shrink these
        self.restart_interval_sec: float = cfg.restart_interval_sec
        self.poll_interval_sec: float = config.POLL_INTERVAL_SEC
        self.restart_grace_sec: float = config.RESTART_GRACE_SEC
        self.backoff_sec: float = config.BACKOFF_SEC

        # wall clock used for stream age
        self._clock = time.time

        # plain flag: the signal handler must not take any lock
        self.stop_requested = False

        self._log_file_failed = False
