import os
from pathlib import Path

# Fixed encoder geometry for both the webcam and the visuals layer
VIDEO_SIZE = "1280x720"
VIDEO_FPS = 30

# Supervisor timings (seconds). These are deliberately not configurable.
RESTART_INTERVAL_SEC = 46800  # 13 hours
POLL_INTERVAL_SEC = 60
RESTART_GRACE_SEC = 5
BACKOFF_SEC = 10

_HOME = Path.home()

# Paths and endpoint can be overridden from environment (or .env)
AUDIO_DIR = os.getenv("AUDIO_DIR", str(_HOME / "audio"))
VISUALS_DIR = os.getenv("VISUALS_DIR", str(_HOME / "visual"))
STREAM_KEY = os.getenv("STREAM_KEY", "STREAMKEY")
RTMP_BASE_URL = os.getenv("RTMP_BASE_URL", "rtmp://live.twitch.tv/app/")
WEBCAM_DEVICE = os.getenv("WEBCAM_DEVICE", "/dev/video0")
LOG_FILE = os.getenv("LOG_FILE", str(_HOME / "stream_log.txt"))
ERROR_LOG = os.getenv("ERROR_LOG", str(_HOME / "stream_error.log"))
AUDIO_LIST_FILE = os.getenv("AUDIO_LIST_FILE", "/tmp/audio_list.txt")
FFMPEG_PATH = os.getenv("FFMPEG_PATH", "ffmpeg")
