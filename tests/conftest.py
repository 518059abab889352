"""
Pytest configuration shared across test modules.
Ensures the repository root is importable so `import lightbrowser` works consistently,
and keeps the module-level engine off the working directory.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("LIGHTBROWSER_DATABASE_URL", "sqlite:///:memory:")
