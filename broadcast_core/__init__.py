from .base_state import StreamProcessHandle, StreamState
from .run_config import RunConfiguration, parse_arguments
from .supervisor import StreamSupervisor

__all__ = [
    "RunConfiguration",
    "StreamProcessHandle",
    "StreamState",
    "StreamSupervisor",
    "parse_arguments",
]
