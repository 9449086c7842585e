import sys
from pathlib import Path
import importlib
import importlib.util

import pytest

root = Path(__file__).resolve().parents[1]
sys.path.append(str(root))

package = importlib.import_module("app")
spec = importlib.util.spec_from_file_location("app.app_module", root / "app.py")
app_module = importlib.util.module_from_spec(spec)
spec.loader.exec_module(app_module)
for name in dir(app_module):
    if not name.startswith("_"):
        setattr(package, name, getattr(app_module, name))
package.app_module = app_module

from app.backend.mock_store import MemoryKeyValue  # noqa: E402
from shinydex.catalog import parse_catalog  # noqa: E402
from shinydex.interaction import Tracker  # noqa: E402
from shinydex.store import ConfigStore, StateStore  # noqa: E402
from shinydex.view import Control, Label, OptionsBar, StatsBar  # noqa: E402


@pytest.fixture
def catalog():
    return parse_catalog(
        [
            {"name": "Vert Plaza", "items": ["001", "004", "007"]},
            {"name": "Bleu Sector", "items": ["025", "035"]},
        ]
    )


@pytest.fixture
def backend():
    return MemoryKeyValue()


@pytest.fixture
def tracker(catalog, backend):
    t = Tracker(
        catalog,
        StateStore(backend),
        ConfigStore(backend),
        stats_bar=StatsBar(total_progress=Label(), percentage=Label()),
        options_bar=OptionsBar(toggle_checked=True, save_button=Control(label="Save as image")),
    )
    t.start()
    return t
