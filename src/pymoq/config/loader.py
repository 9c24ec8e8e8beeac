import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

DEFAULT_MOCK_SUFFIX = "_mock.py"
DEFAULT_TEST_MARKERS: Tuple[str, ...] = ("test_", "_test", "conftest")


@dataclass
class MoqConfig:
    # Absolute module roots, in addition to the implicit package root.
    search_paths: List[Path] = field(default_factory=list)
    mock_suffix: str = DEFAULT_MOCK_SUFFIX
    line_length: int = 88
    test_markers: Tuple[str, ...] = DEFAULT_TEST_MARKERS
    config_path: Optional[Path] = None


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            break
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def load_config_from_path(search_path: Path) -> MoqConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
    except FileNotFoundError:
        return MoqConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    moq_data: Dict[str, Any] = data.get("tool", {}).get("pymoq", {})

    base = config_path.parent
    search_paths = [(base / p).resolve() for p in moq_data.get("search_paths", [])]
    markers = moq_data.get("test_markers")

    return MoqConfig(
        search_paths=search_paths,
        mock_suffix=moq_data.get("mock_suffix", DEFAULT_MOCK_SUFFIX),
        line_length=int(moq_data.get("line_length", 88)),
        test_markers=tuple(markers) if markers else DEFAULT_TEST_MARKERS,
        config_path=config_path,
    )
