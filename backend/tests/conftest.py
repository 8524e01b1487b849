import sys
from pathlib import Path

import pytest

# Put backend/ on sys.path so tests import services/, storage/ etc. directly
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture
def store(tmp_path):
    """A FileStorage vault rooted at the test's tmp_path."""
    from storage.file_storage import FileStorage

    return FileStorage(str(tmp_path))
