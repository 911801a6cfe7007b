import pytest

from pwmeter.core.dictionary import load_dictionary


@pytest.fixture(scope="session")
def dictionary():
    return load_dictionary()


@pytest.fixture
def no_words():
    return frozenset()
