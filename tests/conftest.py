import os
import tempfile
from pathlib import Path

# Point the engine at a throwaway database before backend.config is imported.
_tmp_dir = Path(tempfile.mkdtemp(prefix="daywise-tests-"))
os.environ.setdefault("DAYWISE_DATABASE_URL", f"sqlite+aiosqlite:///{_tmp_dir / 'test.db'}")
