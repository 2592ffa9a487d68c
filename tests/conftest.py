import os
import tempfile

import pytest

from salesboard.db import init_db
from salesboard.settings import Settings

# salesboard.main builds its module-level app from the environment on import;
# keep that database out of the working tree.
os.environ.setdefault("SALESBOARD_DATA_DIR", tempfile.mkdtemp(prefix="salesboard-"))


@pytest.fixture
def settings(tmp_path):
    s = Settings(data_dir=tmp_path, db_path=tmp_path / "t.sqlite")
    init_db(s)
    return s
