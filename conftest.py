"""Root conftest.py — ensures the local covwalk package takes precedence over any installed version."""

from __future__ import annotations

import sys
from pathlib import Path

# Insert src/ at the front of sys.path so that `import covwalk` always
# resolves to the local source tree, even if another covwalk is installed.
_src_root = str(Path(__file__).parent / "src")
if _src_root not in sys.path:
    sys.path.insert(0, _src_root)
