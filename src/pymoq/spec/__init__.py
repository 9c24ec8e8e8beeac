from .errors import (
    FormatError,
    LoadError,
    MoqError,
    MustSpecifyInterface,
    NameCollision,
    NoPackageFound,
    NotAnInterface,
    NotFound,
    StaleFileCleanupError,
)
from .models import (
    ContractDef,
    ImportSet,
    MethodDef,
    MockDocument,
    ModuleDescriptor,
    ParamDef,
    ParamKind,
)
from .protocols import FileSystemAdapter, FormatterProtocol, MockRendererProtocol

__all__ = [
    "ContractDef",
    "ImportSet",
    "MethodDef",
    "MockDocument",
    "ModuleDescriptor",
    "ParamDef",
    "ParamKind",
    # Protocols
    "FileSystemAdapter",
    "FormatterProtocol",
    "MockRendererProtocol",
    # Errors
    "MoqError",
    "NoPackageFound",
    "LoadError",
    "NotFound",
    "NotAnInterface",
    "MustSpecifyInterface",
    "NameCollision",
    "FormatError",
    "StaleFileCleanupError",
]
