import subprocess
import sys
from pathlib import Path


def run_type_check(script_path: Path, cwd: Path) -> subprocess.CompletedProcess:
    """
    Runs mypy on a generated module from the root its package imports from.

    The cache goes under ``cwd`` so that runs never share state.
    """
    return subprocess.run(
        [
            sys.executable,
            "-m",
            "mypy",
            "--no-error-summary",
            "--cache-dir",
            str(cwd / ".mypy_cache"),
            str(script_path),
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
    )
