import os
import time
from typing import List, Optional

from .assets import AudioPlaylist, VisualsAsset, build_audio_playlist, resolve_visuals_asset
from .base_state import StreamState
from .commands import build_fallback_command, build_primary_command
from .errors import (
    BroadcastError,
    FallbackUnavailable,
    ShutdownRequested,
    SubprocessDied,
    SubprocessLaunchFailure,
    VisualsResolutionError,
)
from .run_config import describe

RUNNING_STATES = (StreamState.RUNNING_PRIMARY, StreamState.RUNNING_FALLBACK)


class WatcherMixin:
    # ---------- asset preparation ----------

    def _resolve_visuals(self) -> VisualsAsset:
        try:
            visuals = resolve_visuals_asset(self.config.visuals_dir)
        except VisualsResolutionError as e:
            if e.candidates:
                self._append_log(
                    f"ERROR: Multiple files found in visuals directory {e.directory}. "
                    "Only one file is allowed."
                )
                self._append_log("Files found:")
                for path in e.candidates:
                    self._append_log(f"  {path}")
            else:
                self._append_log(f"ERROR: No files found in visuals directory {e.directory}")
            raise
        self._append_log(f"Using visuals file: {visuals.path}")
        return visuals

    def _prepare_playlist(self) -> Optional[AudioPlaylist]:
        """
        Rebuild the concat list. Returns None when this start should carry
        no audio track (audio disabled, or no .mp3 files present).
        """
        if not self.config.audio_enabled:
            return None
        playlist = build_audio_playlist(self.config.audio_dir, self.config.audio_list_file)
        self._append_log(
            f"Created audio list at {playlist.list_file} with {len(playlist)} entries"
        )
        if not playlist.entries:
            self._append_log(
                f"WARNING: No .mp3 files in {self.config.audio_dir}; streaming without audio"
            )
            return None
        self._append_log("Audio list contents:")
        for entry in playlist.entries:
            self._append_log(f"  {entry}")
        return playlist

    def _primary_command(self) -> List[str]:
        visuals = self._resolve_visuals() if self.config.visuals_enabled else None
        playlist = self._prepare_playlist()
        if not os.path.exists(self.config.webcam_device):
            raise SubprocessLaunchFailure(f"Webcam device not found: {self.config.webcam_device}")
        return build_primary_command(self.config, visuals, playlist)

    def _fallback_command(self) -> List[str]:
        if not self.config.visuals_enabled:
            raise FallbackUnavailable()
        visuals = self._resolve_visuals()
        playlist = self._prepare_playlist()
        return build_fallback_command(self.config, visuals, playlist)

    # ---------- state handlers ----------

    def _start_primary(self) -> StreamState:
        self._append_log(
            "Starting stream with configuration: "
            f"audio={str(self.config.audio_enabled).lower()}, "
            f"visuals={str(self.config.visuals_enabled).lower()}"
        )
        # never two encoders at once
        self._kill_encoder()
        try:
            cmd = self._primary_command()
            self._launch_encoder(cmd, "primary")
        except (BroadcastError, OSError) as e:
            self._record_error(e)
            self._append_log("Primary stream failed to start. Trying fallback...")
            return StreamState.STARTING_FALLBACK
        return StreamState.RUNNING_PRIMARY

    def _start_fallback(self) -> StreamState:
        self._append_log("Starting fallback stream without webcam...")
        self._kill_encoder()
        try:
            cmd = self._fallback_command()
            self._launch_encoder(cmd, "fallback")
        except (BroadcastError, OSError) as e:
            self._record_error(e)
            self._append_log(
                f"Both primary and fallback streams failed. Restarting in {self.backoff_sec:g} seconds..."
            )
            return StreamState.BACKOFF
        return StreamState.RUNNING_FALLBACK

    def _record_error(self, err: Exception) -> None:
        if isinstance(err, BroadcastError):
            self.last_error = err
        else:
            self.last_error = SubprocessLaunchFailure(str(err))
        # resolution errors already logged their details
        if not isinstance(err, VisualsResolutionError):
            self._append_log(f"ERROR: {err}")

    def _poll_tick(self) -> StreamState:
        """
        One liveness/age check of the running encoder, without waiting.
        Returns the next state.
        """
        handle = self.handle
        if handle is None or handle.proc.poll() is not None:
            pid = handle.pid if handle is not None else -1
            rc = handle.proc.returncode if handle is not None else None
            self.last_error = SubprocessDied(pid, rc)
            self._append_log(f"{self.last_error}. Starting fallback...")
            self.handle = None
            return StreamState.STARTING_FALLBACK

        elapsed = self._clock() - handle.started_at
        if elapsed >= self.restart_interval_sec:
            hours = self.restart_interval_sec / 3600
            self._append_log(
                f"Reached scheduled {hours:g}-hour restart interval. Restarting stream..."
            )
            self._kill_encoder()
            # let the capture device and the RTMP session go away
            self._wait(self.restart_grace_sec)
            return StreamState.STARTING_PRIMARY

        return self.state

    def _watch(self) -> StreamState:
        next_state = self._poll_tick()
        if next_state is self.state:
            self._wait(self.poll_interval_sec)
        return next_state

    def _backoff(self) -> StreamState:
        self._wait(self.backoff_sec)
        return StreamState.STARTING_PRIMARY

    # ---------- main loop ----------

    def _wait(self, seconds: float) -> None:
        """
        Block the control thread. A SIGINT/SIGTERM arriving here raises
        ShutdownRequested out of the sleep immediately.
        """
        if not self.stop_requested:
            time.sleep(seconds)

    def request_shutdown(self) -> None:
        self.stop_requested = True

    def handle_signal(self, signum: int, frame=None) -> None:
        """
        SIGINT/SIGTERM handler. Takes no locks; it flags the request and
        unwinds the control loop. Repeat signals during cleanup are ignored.
        """
        if self.stop_requested:
            return
        self.stop_requested = True
        raise ShutdownRequested(signum)

    def step(self) -> StreamState:
        """Run the handler for the current state and return the next one."""
        if self.stop_requested:
            return StreamState.SHUTTING_DOWN
        if self.state is StreamState.STARTING_PRIMARY:
            next_state = self._start_primary()
        elif self.state is StreamState.STARTING_FALLBACK:
            next_state = self._start_fallback()
        elif self.state in RUNNING_STATES:
            next_state = self._watch()
        elif self.state is StreamState.BACKOFF:
            next_state = self._backoff()
        else:
            return StreamState.SHUTTING_DOWN
        if self.stop_requested:
            return StreamState.SHUTTING_DOWN
        return next_state

    def shutdown(self) -> None:
        self._append_log("Received termination signal. Cleaning up and exiting...")
        self.state = StreamState.SHUTTING_DOWN
        self._kill_encoder()

    def run(self) -> int:
        """
        Supervise the encoder until a shutdown is requested.
        Always returns exit status 0.
        """
        hours = self.restart_interval_sec / 3600
        self._append_log(f"=== Starting 24/7 stream with {hours:g}-hour restarts ===")
        for line in describe(self.config):
            self._append_log(line)
        self._append_log(f"Starting monitor with {hours:g}-hour periodic restart")
        try:
            try:
                while self.state is not StreamState.SHUTTING_DOWN:
                    self.state = self.step()
            except ShutdownRequested:
                pass
            self.shutdown()
        finally:
            # an encoder must never outlive the supervisor
            self._kill_encoder()
        self._append_log("Supervisor stopped.")
        return 0
