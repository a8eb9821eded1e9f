import sys
from pathlib import Path

# Ensure src (for py2printers) and the repo root (for tests.* helpers) are importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / 'src'
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
