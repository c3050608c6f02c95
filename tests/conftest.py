"""Shared test setup."""

import os
import tempfile

# Keep the module-level database out of the project data directory
os.environ.setdefault("PATH_COMMUTE_DATA_DIR", tempfile.mkdtemp(prefix="path_commute_test_"))
