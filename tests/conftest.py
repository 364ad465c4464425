import random

import pytest

from realmshards.battle.session import GameSession
from realmshards.data.catalog import load_catalog
from realmshards.progression.skill_tree import get_skill_tree
from realmshards.progression.trainer import create_trainer
from realmshards.system.settings import Settings


class FixedRng:
    """Stands in for random.Random when a roll has to land a particular way.

    ``random()`` always returns ``value``; ``uniform`` scales it; index picks
    always take the first candidate.
    """

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.value

    def randrange(self, n: int) -> int:
        return 0

    def randint(self, a: int, b: int) -> int:
        return a


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()


@pytest.fixture(scope="session")
def tree():
    return get_skill_tree()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fixed_rng():
    return FixedRng


@pytest.fixture
def settings(tmp_path):
    return Settings.defaults(tmp_path / "settings.json")


@pytest.fixture
def trainer(catalog, rng):
    return create_trainer(catalog, 4, rng=rng)


@pytest.fixture
def session(catalog, tree, settings):
    return GameSession(settings, catalog, rng=random.Random(7), tree=tree)
