import os
import tempfile
from datetime import datetime
from zoneinfo import ZoneInfo

# must be set before quickadd.config is imported
os.environ.setdefault(
    "DATABASE_URL", f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='quickadd-tests-')}/tasks.sqlite"
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from quickadd.deps import get_now  # noqa: E402
from quickadd.main import app  # noqa: E402

# a Monday
FROZEN_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=ZoneInfo("UTC"))


@pytest.fixture
def client():
    app.dependency_overrides[get_now] = lambda: FROZEN_NOW
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
