from .bus import SpyBus
from .harness import run_type_check
from .workspace import WorkspaceFactory

__all__ = ["SpyBus", "WorkspaceFactory", "run_type_check"]
