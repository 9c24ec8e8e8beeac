"""Python front end: package resolution, symbol loading and signature extraction."""

from .extractor import SignatureExtractor, is_anonymous
from .loader import SymbolTable, load_symbols
from .qualifier import ImportQualifier
from .resolver import is_test_name, resolve_source, strip_vendor_path

__all__ = [
    "ImportQualifier",
    "SignatureExtractor",
    "SymbolTable",
    "is_anonymous",
    "is_test_name",
    "load_symbols",
    "resolve_source",
    "strip_vendor_path",
]
