import ast
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from pymoq.config.loader import DEFAULT_TEST_MARKERS
from pymoq.spec import LoadError, ModuleDescriptor, NoPackageFound

logger = logging.getLogger(__name__)

VENDOR_MARKERS = ("vendor", "_vendor")


def is_test_name(name: str, markers: Sequence[str] = DEFAULT_TEST_MARKERS) -> bool:
    if name in ("test", "tests"):
        return True
    for marker in markers:
        if marker.endswith("_") and name.startswith(marker):
            return True
        if marker.startswith("_") and name.endswith(marker):
            return True
        if name == marker:
            return True
    return False


def strip_vendor_path(path: str) -> str:
    """
    Strips everything up to the last vendoring segment of a dotted path.
    For example ``pip._vendor.requests.adapters`` resolves to
    ``requests.adapters``.
    """
    parts = path.split(".")
    for i in range(len(parts) - 1, -1, -1):
        if parts[i] in VENDOR_MARKERS and i < len(parts) - 1:
            return ".".join(parts[i + 1 :])
    return path


def _find_module_root(directory: Path, search_paths: Iterable[Path]) -> Path:
    candidates = [
        root for root in search_paths if root == directory or root in directory.parents
    ]
    # The deepest configured root wins, mirroring how the longest sys.path
    # prefix shadows its parents.
    candidates = [c for c in candidates if c != directory]
    if candidates:
        return max(candidates, key=lambda p: len(p.parts))

    current = directory
    while (current.parent / "__init__.py").is_file() and current.parent != current:
        current = current.parent
    return current.parent


def _parse_files(
    directory: Path, markers: Sequence[str]
) -> List[Tuple[Path, ast.Module]]:
    parsed = []
    for path in sorted(directory.glob("*.py")):
        if is_test_name(path.stem, markers):
            continue
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise LoadError(f"cannot read {path}: {e}") from e
        try:
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as e:
            raise LoadError(f"{path}:{e.lineno}: {e.msg}") from e
        parsed.append((path, tree))
    return parsed


def resolve_source(
    directory: Path,
    package_name: Optional[str] = None,
    search_paths: Iterable[Path] = (),
    test_markers: Sequence[str] = DEFAULT_TEST_MARKERS,
) -> ModuleDescriptor:
    directory = Path(directory).resolve()
    if not directory.is_dir():
        raise NoPackageFound(f"{directory} is not a directory")

    parsed = _parse_files(directory, test_markers)
    if not parsed:
        raise NoPackageFound(f"no Python source files found in {directory}")

    inferred = directory.name
    if not package_name:
        if is_test_name(inferred, test_markers) or not inferred.isidentifier():
            raise NoPackageFound(f"failed to determine package name for {directory}")
        package_name = inferred

    root = _find_module_root(directory, [Path(p).resolve() for p in search_paths])
    import_path = ".".join(directory.relative_to(root).parts)

    parent, _, _ = strip_vendor_path(import_path).rpartition(".")
    target_path = f"{parent}.{package_name}" if parent else package_name

    logger.debug(
        "resolved %s as %s (target %s, root %s)", directory, import_path, target_path, root
    )
    return ModuleDescriptor(
        package_name=package_name,
        import_path=import_path,
        target_path=target_path,
        root=root,
        files=tuple(path for path, _ in parsed),
    )
