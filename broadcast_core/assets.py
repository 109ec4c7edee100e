import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import VisualsResolutionError


@dataclass(frozen=True)
class VisualsAsset:
    path: str


@dataclass(frozen=True)
class AudioPlaylist:
    # absolute .mp3 paths, in the order ffmpeg will play them
    entries: List[str] = field(default_factory=list)
    # concat-demuxer list file holding one "file '...'" record per entry
    list_file: str = ""

    def __len__(self) -> int:
        return len(self.entries)


def _visible_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir()
        if not p.name.startswith(".") and p.is_file()
    )


def resolve_visuals_asset(directory: str) -> VisualsAsset:
    """
    Find the single visuals file directly inside ``directory``.

    Hidden files and subdirectories are ignored. Zero or several candidates
    raise VisualsResolutionError; in the latter case the error carries every
    candidate path.
    """
    files = _visible_files(Path(directory))
    if len(files) != 1:
        raise VisualsResolutionError(directory, [str(p) for p in files])
    return VisualsAsset(path=str(files[0]))


def concat_record(path: str) -> str:
    """
    One concat-demuxer line for ``path``.

    Single quotes inside the path are closed, escaped and reopened the way
    ffmpeg's concat parser expects.
    """
    escaped = path.replace("'", "'\\''")
    return f"file '{escaped}'"


def build_audio_playlist(directory: str, list_file: str) -> AudioPlaylist:
    """
    Collect every top-level *.mp3 in ``directory`` and (re)write ``list_file``.

    Any previous list file is removed first so stale entries never survive a
    restart. An empty directory produces an empty list file, not an error.
    """
    base = Path(directory)
    entries: List[str] = []
    if base.is_dir():
        entries = [
            os.path.abspath(str(p))
            for p in sorted(base.glob("*.mp3"))
            if not p.name.startswith(".") and p.is_file()
        ]

    target = Path(list_file)
    if target.exists():
        target.unlink()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        for entry in entries:
            f.write(concat_record(entry) + "\n")

    return AudioPlaylist(entries=entries, list_file=str(target))
