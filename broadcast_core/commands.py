"""
ffmpeg argument lists for the two pipeline variants.

Both builders are pure: they read the run configuration plus the assets
resolved for this start and return a fresh argv list. Nothing here touches
the filesystem or spawns processes.
"""
from typing import List, Optional

from .assets import AudioPlaylist, VisualsAsset
from .config import VIDEO_FPS, VIDEO_SIZE
from .errors import FallbackUnavailable, VisualsResolutionError
from .run_config import RunConfiguration

OVERLAY_OPACITY = 0.5


def _overlay_filter() -> str:
    scale = VIDEO_SIZE.replace("x", ":")
    return (
        f"[1:v]scale={scale},format=yuv420p[scaled];"
        f"[0:v][scaled]blend=all_mode=overlay:all_opacity={OVERLAY_OPACITY}[outv]"
    )


def _webcam_input(cfg: RunConfiguration) -> List[str]:
    return [
        "-f",
        "v4l2",
        "-thread_queue_size",
        "1024",
        "-framerate",
        str(VIDEO_FPS),
        "-video_size",
        VIDEO_SIZE,
        "-input_format",
        "mjpeg",
        "-i",
        cfg.webcam_device,
    ]


def _visuals_input(visuals: VisualsAsset) -> List[str]:
    return ["-stream_loop", "-1", "-i", visuals.path]


def _audio_input(playlist: AudioPlaylist) -> List[str]:
    return [
        "-stream_loop",
        "-1",
        "-f",
        "concat",
        "-safe",
        "0",
        "-i",
        playlist.list_file,
    ]


def _video_encoding() -> List[str]:
    return [
        "-c:v",
        "libx264",
        "-preset",
        "veryfast",
        "-tune",
        "zerolatency",
        "-maxrate",
        "1500k",
        "-bufsize",
        "3000k",
        "-g",
        "60",
        "-crf",
        "28",
        "-profile:v",
        "high",
        "-level",
        "4.0",
    ]


def _audio_encoding() -> List[str]:
    return ["-c:a", "aac", "-b:a", "128k", "-ar", "44100", "-ac", "2"]


def _output(cfg: RunConfiguration) -> List[str]:
    return ["-f", "flv", "-movflags", "+faststart", cfg.rtmp_url]


def _require_visuals(cfg: RunConfiguration, visuals: Optional[VisualsAsset]) -> VisualsAsset:
    if visuals is None:
        raise VisualsResolutionError(cfg.visuals_dir)
    return visuals


def build_primary_command(
    cfg: RunConfiguration,
    visuals: Optional[VisualsAsset] = None,
    playlist: Optional[AudioPlaylist] = None,
) -> List[str]:
    """
    Webcam pipeline, optionally blended with the visuals loop and carrying
    the looping audio playlist.

    Input order is webcam, then visuals, then audio, so the audio stream's
    input index is 2 with visuals and 1 without.
    """
    use_visuals = cfg.visuals_enabled
    use_audio = cfg.audio_enabled and playlist is not None

    cmd = [cfg.ffmpeg_path, "-hide_banner", "-nostdin"]
    cmd += _webcam_input(cfg)
    n_inputs = 1

    if use_visuals:
        cmd += _visuals_input(_require_visuals(cfg, visuals))
        n_inputs += 1

    audio_index = n_inputs
    if use_audio:
        cmd += _audio_input(playlist)

    # Video mapping: blended composite or the raw webcam stream
    if use_visuals:
        cmd += ["-filter_complex", _overlay_filter(), "-map", "[outv]"]
    else:
        cmd += ["-map", "0:v"]

    if use_audio:
        cmd += ["-map", f"{audio_index}:a:0"]

    cmd += _video_encoding()
    cmd += _audio_encoding() if use_audio else ["-an"]
    cmd += _output(cfg)
    return cmd


def build_fallback_command(
    cfg: RunConfiguration,
    visuals: Optional[VisualsAsset] = None,
    playlist: Optional[AudioPlaylist] = None,
) -> List[str]:
    """
    Webcam-less pipeline: the visuals loop is the only video source.
    Raises FallbackUnavailable when visuals are switched off.
    """
    if not cfg.visuals_enabled:
        raise FallbackUnavailable()
    asset = _require_visuals(cfg, visuals)
    use_audio = cfg.audio_enabled and playlist is not None

    cmd = [cfg.ffmpeg_path, "-hide_banner", "-nostdin"]
    cmd += _visuals_input(asset)
    if use_audio:
        cmd += _audio_input(playlist)
        cmd += ["-map", "0:v", "-map", "1:a:0"]
    else:
        cmd += ["-map", "0:v"]

    cmd += _video_encoding()
    cmd += _audio_encoding() if use_audio else ["-an"]
    cmd += _output(cfg)
    return cmd


def format_command(cmd: List[str]) -> str:
    """Single-line rendering of an argv list for the activity log."""
    return " ".join(map(str, cmd))
