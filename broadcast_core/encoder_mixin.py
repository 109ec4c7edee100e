import subprocess
from typing import List

from .base_state import StreamProcessHandle
from .commands import format_command
from .errors import SubprocessLaunchFailure
from .run_config import join_url


class EncoderMixin:
    def _masked(self, cmd: List[str]) -> str:
        # keep the stream key out of the activity log
        text = format_command(cmd)
        if self.config.stream_key:
            masked_url = join_url(self.config.rtmp_base_url, "****")
            text = text.replace(self.config.rtmp_url, masked_url)
        return text

    def _launch_encoder(self, cmd: List[str], mode: str) -> StreamProcessHandle:
        """
        Start one ffmpeg encoder in the background and track it.

        stdout is appended to the activity log and stderr to the error log.
        Raises SubprocessLaunchFailure if the process could not be spawned.
        """
        label = "fallback command" if mode == "fallback" else "command"
        self._append_log(f"Executing {label}: {self._masked(cmd)}")
        with open(self.config.log_file, "ab") as out, open(self.config.error_log, "ab") as err:
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=out,
                    stderr=err,
                )
            except FileNotFoundError as e:
                raise SubprocessLaunchFailure(
                    f"ffmpeg executable not found: {self.config.ffmpeg_path}"
                ) from e
            except OSError as e:
                raise SubprocessLaunchFailure(f"Error starting ffmpeg: {e!r}") from e

        self.handle = StreamProcessHandle(proc=proc, started_at=self._clock(), mode=mode)
        prefix = "Fallback FFmpeg" if mode == "fallback" else "FFmpeg"
        self._append_log(f"{prefix} process started with PID: {proc.pid}")
        return self.handle

    def _kill_encoder(self) -> None:
        """
        Terminate the tracked encoder if it is still running and forget it.
        Safe to call when nothing is tracked or the process already exited.
        """
        handle = self.handle
        if handle is None:
            return
        proc = handle.proc
        if proc.poll() is None:
            self._append_log(f"Terminating ffmpeg process (PID: {proc.pid})")
            try:
                proc.terminate()
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._append_log("Encoder did not terminate in time; killing")
                proc.kill()
                proc.wait()
            except ProcessLookupError:
                # exited between poll() and terminate()
                pass
        self.handle = None
