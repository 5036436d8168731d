"""Convenience wrapper running the sizing CLI from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure local sources are importable without installation
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from actuator_sizing.cli import main  # noqa: E402

if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
