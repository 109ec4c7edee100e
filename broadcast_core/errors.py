from typing import List, Optional


class BroadcastError(Exception):
    """Base class for every error the supervisor knows how to handle."""


class InvalidArgument(BroadcastError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown option: {token}")
        self.token = token


class VisualsResolutionError(BroadcastError):
    """
    The visuals directory does not hold exactly one usable file.

    ``candidates`` lists every matching path when more than one was found,
    so the operator can see what to remove.
    """

    def __init__(self, directory: str, candidates: Optional[List[str]] = None) -> None:
        self.directory = directory
        self.candidates: List[str] = list(candidates or [])
        if not self.candidates:
            msg = f"No files found in visuals directory {directory}"
        else:
            msg = (
                f"Multiple files found in visuals directory {directory}. "
                f"Only one file is allowed: {', '.join(self.candidates)}"
            )
        super().__init__(msg)


class FallbackUnavailable(BroadcastError):
    def __init__(self) -> None:
        super().__init__("Cannot run fallback stream without visuals")


class SubprocessLaunchFailure(BroadcastError):
    pass


class SubprocessDied(BroadcastError):
    def __init__(self, pid: int, returncode: Optional[int]) -> None:
        super().__init__(f"ffmpeg process (PID: {pid}) is no longer running (exit code {returncode})")
        self.pid = pid
        self.returncode = returncode


class ShutdownRequested(BaseException):
    """
    Raised from the SIGINT/SIGTERM handler to unwind whatever the control
    loop is blocked in. Derives from BaseException, like KeyboardInterrupt,
    so ``except Exception`` blocks never swallow it.
    """

    def __init__(self, signum: int) -> None:
        super().__init__(f"Received signal {signum}")
        self.signum = signum
