import pytest

from models.entities import Person, WorkdayWindow


@pytest.fixture
def alice():
    return Person(id="alice", display_name="Alice")


@pytest.fixture
def bob():
    return Person(id="bob", display_name="Bob")


@pytest.fixture
def cast():
    return [Person(id=f"m{i}", display_name=f"Member {i}") for i in range(1, 8)]


@pytest.fixture
def window():
    return WorkdayWindow()
