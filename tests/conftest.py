import sys, os

# Ensure src and the repo root are importable from tests
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

import pytest

from tests.helpers import build_resolver, enable_all


@pytest.fixture
def registry():
    from combo_engine.rulesets.registry import create_default_registry

    return create_default_registry()


__all__ = [
    "build_resolver",
    "enable_all",
]
