from dataclasses import dataclass
from typing import List, Sequence

from . import config
from .errors import InvalidArgument

AUDIO_FLAG = "--disable-audio"
VISUALS_FLAG = "--disable-visuals"

USAGE = f"Available options: {AUDIO_FLAG}, {VISUALS_FLAG}"


def join_url(base: str, key: str) -> str:
    return base.rstrip("/") + "/" + key.lstrip("/")


@dataclass(frozen=True)
class RunConfiguration:
    audio_enabled: bool = True
    visuals_enabled: bool = True
    webcam_device: str = config.WEBCAM_DEVICE
    stream_key: str = config.STREAM_KEY
    rtmp_base_url: str = config.RTMP_BASE_URL
    restart_interval_sec: int = config.RESTART_INTERVAL_SEC
    audio_dir: str = config.AUDIO_DIR
    visuals_dir: str = config.VISUALS_DIR
    log_file: str = config.LOG_FILE
    error_log: str = config.ERROR_LOG
    audio_list_file: str = config.AUDIO_LIST_FILE
    ffmpeg_path: str = config.FFMPEG_PATH

    @property
    def rtmp_url(self) -> str:
        return join_url(self.rtmp_base_url, self.stream_key)


def parse_arguments(args: Sequence[str]) -> RunConfiguration:
    """
    Turn command-line tokens into a RunConfiguration.

    Only the audio/visuals toggles are recognised; any other token raises
    InvalidArgument. Repeating a flag is harmless.
    """
    audio_enabled = True
    visuals_enabled = True
    for token in args:
        if token == AUDIO_FLAG:
            audio_enabled = False
        elif token == VISUALS_FLAG:
            visuals_enabled = False
        else:
            raise InvalidArgument(token)
    return RunConfiguration(audio_enabled=audio_enabled, visuals_enabled=visuals_enabled)


def describe(cfg: RunConfiguration) -> List[str]:
    """Human readable summary lines, logged once at startup."""
    return [
        f"Configuration: USE_AUDIO={str(cfg.audio_enabled).lower()}, "
        f"USE_VISUALS={str(cfg.visuals_enabled).lower()}",
        f"Webcam device: {cfg.webcam_device}",
        f"Audio directory: {cfg.audio_dir}",
        f"Visuals directory: {cfg.visuals_dir}",
        f"Publishing to: {cfg.rtmp_base_url}",
    ]
