import pytest

from lognorm.parser import register_all
from lognorm.parser.registry import Registry


@pytest.fixture
def registry():
    return register_all(Registry())
