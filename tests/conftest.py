"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and registers
the database fixtures from test_fixtures.
"""

import os
import sys
from pathlib import Path

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Settings are read at import time; keep the default engine off disk
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

from test_fixtures import (  # noqa: E402,F401
    engine,
    service_db,
    sarah,
    michael,
    sarah_db,
    michael_db,
    anon_db,
    client,
)
