#!/usr/bin/env python3
"""
24/7 webcam broadcaster with scheduled restarts and a visuals-only fallback.

- Config via .env (AUDIO_DIR, VISUALS_DIR, STREAM_KEY, RTMP_BASE_URL,
  WEBCAM_DEVICE, LOG_FILE, ERROR_LOG, AUDIO_LIST_FILE, FFMPEG_PATH)
- Flags: --disable-audio, --disable-visuals
- Streams the webcam blended with a looping visuals file and a looping
  .mp3 playlist to an RTMP endpoint through ffmpeg
- Restarts every 13 hours; falls back to visuals-only when the webcam
  pipeline dies; retries every 10 seconds when nothing can start
- SIGINT / SIGTERM stop the encoder and exit with status 0
"""
import signal
import sys
from typing import List, Optional

from dotenv import load_dotenv

# Load .env if present
load_dotenv()

from broadcast_core.errors import InvalidArgument
from broadcast_core.run_config import USAGE, parse_arguments
from broadcast_core.supervisor import StreamSupervisor


def install_signal_handlers(supervisor: StreamSupervisor) -> None:
    signal.signal(signal.SIGINT, supervisor.handle_signal)
    signal.signal(signal.SIGTERM, supervisor.handle_signal)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    try:
        cfg = parse_arguments(args)
    except InvalidArgument as e:
        print(e, file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1

    supervisor = StreamSupervisor(cfg)
    install_signal_handlers(supervisor)
    return supervisor.run()


if __name__ == "__main__":
    sys.exit(main())
