from .bus import MessageBus
from .catalog import MessageCatalog
from .protocols import Renderer

__all__ = ["MessageBus", "MessageCatalog", "Renderer"]
