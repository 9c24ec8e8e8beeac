from .messaging.bus import MessageBus
from .messaging.catalog import MessageCatalog
from .transaction import RealFileSystem, TransactionManager

# Global singletons: the message templates and the bus rendering them.
messages = MessageCatalog()
bus = MessageBus(catalog=messages)

__all__ = [
    "bus",
    "messages",
    "MessageBus",
    "MessageCatalog",
    "RealFileSystem",
    "TransactionManager",
]
