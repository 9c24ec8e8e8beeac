from pathlib import Path
from typing import Protocol

from .models import MockDocument


class MockRendererProtocol(Protocol):
    def generate(self, document: MockDocument) -> str: ...


class FormatterProtocol(Protocol):
    def format(self, source: str) -> str: ...


class FileSystemAdapter(Protocol):
    def write_text(self, path: Path, content: str) -> None: ...
    def exists(self, path: Path) -> bool: ...
    def read_text(self, path: Path) -> str: ...
    def remove(self, path: Path) -> None: ...
