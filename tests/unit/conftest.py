import pytest

from .stubs import ScriptedNode


@pytest.fixture
def node():
    return ScriptedNode()
