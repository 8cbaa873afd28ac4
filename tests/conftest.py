from typing import Optional
import importlib.util
import importlib
import tempfile
import textwrap
import logging
import pytest
import shutil
import sys
import os
import gc

# Add src dir to path to allow importing typeassert
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from typeassert import logger as typeassert_logger
from typeassert.markers import MISSING


@pytest.fixture(scope="function", autouse=True)
def configure_typeassert_logging():
    """Show TRACE output from typeassert for the duration of each test."""
    original_level = typeassert_logger.level
    typeassert_logger.setLevel(logging.DEBUG)
    yield
    typeassert_logger.setLevel(original_level)

# --- Fake marker source ---
class FakeMarkerSource:
    """Marker source backed by a dict of (type, kind) -> list of property dicts."""

    def __init__(self, markers=None):
        self.markers = dict(markers or {})
        self.calls = []

    def get_markers(self, tp, kind):
        self.calls.append((tp, kind))
        return list(self.markers.get((tp, kind), []))

    def get_property(self, marker, name):
        return marker.get(name, MISSING)


@pytest.fixture
def fake_source():
    return FakeMarkerSource()

# --- Fixture: Temporary Module ---
@pytest.fixture(scope="function")
def temp_module():
    """Writes and imports throwaway modules, removing them afterwards."""
    temp_dir = tempfile.mkdtemp()
    sys.path.insert(0, temp_dir)
    imported_modules = []

    def _create_module(module_name: str, code: str, directory: Optional[str] = None):
        """Import `code` as `module_name`; with `directory`, load it from that subfolder."""
        module_dir = os.path.join(temp_dir, directory) if directory else temp_dir
        os.makedirs(module_dir, exist_ok=True)
        module_path = os.path.join(module_dir, f'{module_name}.py')
        with open(module_path, 'w') as f:
            f.write(textwrap.dedent(code))
        if directory:
            spec = importlib.util.spec_from_file_location(module_name, module_path)
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
        else:
            importlib.invalidate_caches()
            module = importlib.import_module(module_name)
        imported_modules.append(module_name)
        return module

    yield _create_module

    for module_name in imported_modules:
        sys.modules.pop(module_name, None)
    if temp_dir in sys.path:
        sys.path.remove(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)
    gc.collect()
