import pytest

from tests.test_utils import ScriptedGame


@pytest.fixture
def scripted():
    """Factory fixture to create scripted games."""

    def _builder(players_config=None, gains=None):
        return ScriptedGame(players_config, gains)

    return _builder
