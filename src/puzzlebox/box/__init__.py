"""PuzzleBox coordinator and its result models.

Architecture Note:
    box/ is the stateful service layer tying the registry, guard oracle and
    notification fan-out together. Request handlers of any outer protocol
    talk to PuzzleBox, not to the registry directly.
"""

from puzzlebox.box.box import PuzzleBox
from puzzlebox.box.models import AddResult, ResourceDescriptor, ResourcePage, ResourceTemplate
from puzzlebox.box.sync_runner import SyncRunner

__all__ = [
    "PuzzleBox",
    "AddResult",
    "ResourceDescriptor",
    "ResourcePage",
    "ResourceTemplate",
    "SyncRunner",
]
