import pytest

from helpers import FakeSubmitter


@pytest.fixture
def submitter():
    return FakeSubmitter()
