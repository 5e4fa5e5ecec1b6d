# tests/conftest.py
"""
Shared fixtures: a small in-memory accessibility tree.

    Application "Demo" (pid 42)
      Window "Main"                 id=main
        Button "OK"                 id=ok      enabled
        CloseButton/Button "Close"  id=close   disabled
      Group "Sidebar"               id=sidebar
        Button "Help"               id=help    (no enabled attribute)
        StaticText "Hello world"    id=label
"""

import copy

import pytest
import yaml

from uiauto_ax.backends.memory import MemoryHandleService
from uiauto_ax.config import TimeConfig
from uiauto_ax.massager import process_element
from uiauto_ax.naming import INFLECTOR
from uiauto_ax.timinglogger import TIMING_LOGGER


TREE = {
    "role": "AXApplication",
    "id": "app",
    "pid": 42,
    "attributes": {
        "AXTitle": "Demo",
        "AXFocusedUIElement": {"ref": "ok"},
    },
    "children": [
        {
            "role": "AXWindow",
            "id": "main",
            "attributes": {
                "AXTitle": "Main",
                "AXPosition": {"point": [0, 0]},
                "AXSize": {"size": [800, 600]},
                "AXFocused": True,
            },
            "writable": ["AXPosition", "AXSize"],
            "actions": ["AXRaise"],
            "children": [
                {
                    "role": "AXButton",
                    "id": "ok",
                    "attributes": {
                        "AXTitle": "OK",
                        "AXEnabled": True,
                        "AXPosition": {"point": [10, 20]},
                        "AXSize": {"size": [80, 30]},
                    },
                    "actions": ["AXPress"],
                },
                {
                    "role": "AXButton",
                    "subrole": "AXCloseButton",
                    "id": "close",
                    "attributes": {"AXTitle": "Close", "AXEnabled": False},
                    "actions": ["AXPress"],
                },
            ],
        },
        {
            "role": "AXGroup",
            "id": "sidebar",
            "attributes": {"AXTitle": "Sidebar"},
            "children": [
                {
                    "role": "AXButton",
                    "id": "help",
                    "attributes": {"AXTitle": "Help"},
                },
                {
                    "role": "AXStaticText",
                    "id": "label",
                    "attributes": {"AXValue": "Hello world", "AXNumberOfCharacters": 11},
                    "param_attributes": {"AXStringForRange": "Hello world"},
                    "writable": ["AXValue"],
                },
            ],
        },
    ],
}


@pytest.fixture(autouse=True)
def reset_global_state():
    """Undo process-wide configuration changes made by a test."""
    yield
    TimeConfig.reset_to_defaults()
    INFLECTOR.reset()
    TIMING_LOGGER.disable()
    TIMING_LOGGER.configure(file_path=None)


@pytest.fixture
def tree_data():
    return copy.deepcopy(TREE)


@pytest.fixture
def service(tree_data):
    return MemoryHandleService.from_dict(tree_data)


@pytest.fixture
def element(service):
    """Build the proxy for a node by its fixture id."""
    def _element(name):
        return process_element(service, service.handle_named(name))
    return _element


@pytest.fixture
def app(element):
    return element("app")


@pytest.fixture
def fixture_file(tmp_path, tree_data):
    path = tmp_path / "tree.yaml"
    path.write_text(yaml.safe_dump(tree_data, sort_keys=False), encoding="utf-8")
    return path
