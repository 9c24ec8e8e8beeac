import importlib
import sys

import pytest

from pymoq.test_utils import WorkspaceFactory

SHOP_MODELS = """
from dataclasses import dataclass


@dataclass
class Item:
    id: str
"""

SHOP_STORE = """
from typing import Optional, Protocol

from .models import Item


class Fetcher(Protocol):
    def fetch(self, id: str) -> Optional[Item]: ...


class Empty(Protocol):
    pass


class Person:
    name: str
"""


@pytest.fixture
def workspace_factory(tmp_path):
    return WorkspaceFactory(tmp_path)


@pytest.fixture
def shop(workspace_factory):
    """A `shop` package declaring `Fetcher` in shop/store.py."""
    root = workspace_factory.with_package(
        "shop", models=SHOP_MODELS, store=SHOP_STORE
    ).build()
    return root / "shop"


@pytest.fixture
def import_fresh(monkeypatch):
    """Imports a module from a temporary root, isolated from earlier tests."""
    touched = []

    def _import(root, module_name):
        top = module_name.split(".")[0]
        for name in list(sys.modules):
            if name == top or name.startswith(top + "."):
                monkeypatch.delitem(sys.modules, name)
        touched.append(top)
        monkeypatch.syspath_prepend(str(root))
        importlib.invalidate_caches()
        return importlib.import_module(module_name)

    yield _import

    for top in touched:
        for name in list(sys.modules):
            if name == top or name.startswith(top + "."):
                sys.modules.pop(name, None)
