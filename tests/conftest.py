"""Shared fixtures: temp media directories, fake ffmpeg processes, a fake clock."""
import subprocess
from typing import List, Optional

import pytest

from broadcast_core.run_config import RunConfiguration
from broadcast_core.supervisor import StreamSupervisor


class FakeProc:
    """Stands in for subprocess.Popen; exits only when told to."""

    _next_pid = 4000

    def __init__(self, args, **kwargs):
        FakeProc._next_pid += 1
        self.pid = FakeProc._next_pid
        self.args = list(args)
        self.kwargs = kwargs
        self.returncode: Optional[int] = None
        self.terminated = False
        self.killed = False

    def poll(self):
        return self.returncode

    def exit(self, code: int = 1) -> None:
        self.returncode = code

    def terminate(self):
        self.terminated = True
        if self.returncode is None:
            self.returncode = -15

    def kill(self):
        self.killed = True
        if self.returncode is None:
            self.returncode = -9

    def wait(self, timeout=None):
        return self.returncode


class FakePopen:
    def __init__(self) -> None:
        self.launched: List[FakeProc] = []
        self.fail_with: Optional[BaseException] = None
        self.on_launch = None

    def __call__(self, args, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        proc = FakeProc(args, **kwargs)
        self.launched.append(proc)
        if self.on_launch is not None:
            self.on_launch(proc)
        return proc

    @property
    def last(self) -> FakeProc:
        return self.launched[-1]


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def media(tmp_path):
    """audio/, visual/ and a fake webcam device node under tmp_path."""
    audio = tmp_path / "audio"
    visual = tmp_path / "visual"
    audio.mkdir()
    visual.mkdir()
    webcam = tmp_path / "video0"
    webcam.touch()
    return tmp_path


@pytest.fixture
def make_config(media):
    def _make(**overrides) -> RunConfiguration:
        values = dict(
            webcam_device=str(media / "video0"),
            stream_key="live_abc123",
            rtmp_base_url="rtmp://live.example.com/app/",
            audio_dir=str(media / "audio"),
            visuals_dir=str(media / "visual"),
            log_file=str(media / "stream_log.txt"),
            error_log=str(media / "stream_error.log"),
            audio_list_file=str(media / "audio_list.txt"),
            ffmpeg_path="ffmpeg",
        )
        values.update(overrides)
        return RunConfiguration(**values)

    return _make


@pytest.fixture
def fake_popen(monkeypatch):
    fake = FakePopen()
    monkeypatch.setattr(subprocess, "Popen", fake)
    return fake


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_supervisor(fake_popen, clock):
    def _make(cfg: RunConfiguration) -> StreamSupervisor:
        sup = StreamSupervisor(cfg)
        sup.poll_interval_sec = 0
        sup.restart_grace_sec = 0
        sup.backoff_sec = 0
        sup._clock = clock
        return sup

    return _make
