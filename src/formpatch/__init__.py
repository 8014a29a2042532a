"""formpatch: broadcast a model's validation state as idempotent UI patch operations."""

from formpatch.models import BroadcastConfig, ErrorCollection, FormRecord, PatchOperation
from formpatch.patching import Broadcaster, InvalidSpecError, MissingErrorStateError, broadcast_errors

__version__ = "0.1.0"

__all__ = [
    "BroadcastConfig",
    "Broadcaster",
    "ErrorCollection",
    "FormRecord",
    "InvalidSpecError",
    "MissingErrorStateError",
    "PatchOperation",
    "__version__",
    "broadcast_errors",
]
