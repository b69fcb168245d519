import pytest

from fakes import SleepRecorder


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()
