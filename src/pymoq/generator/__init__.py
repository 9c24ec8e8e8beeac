from .formatter import BlackFormatter, ImportSorter, format_source, sort_imports
from .mock_generator import HEADER, MockGenerator
from .naming import INITIALISMS, exported

__all__ = [
    "BlackFormatter",
    "HEADER",
    "INITIALISMS",
    "ImportSorter",
    "MockGenerator",
    "exported",
    "format_source",
    "sort_imports",
]
