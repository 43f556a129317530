import uuid

import pytest

from storemark.rand import Random, random_string
from storemark.store import open_store

SEED = 301


@pytest.fixture
def memory_address():
    address = f"memory://storemark-{uuid.uuid4().hex[:8]}"
    yield address
    store = open_store(address)
    files = store.fs.find(store.root)
    if files:
        store.fs.rm(files)


@pytest.fixture
def memory_store(memory_address):
    return open_store(memory_address)


@pytest.fixture(scope="session")
def worker0():
    """Контент потока 0 при seed 301 и состояние генератора сразу после него."""
    rng = Random(SEED)
    content = random_string(rng)
    return content, rng.seed


class FakeFile:
    def __init__(self, short_by=0, fail_close=False, read_result=0):
        self.short_by = short_by
        self.fail_close = fail_close
        self.read_result = read_result
        self.writes = []

    def write(self, data):
        self.writes.append(len(data))
        return len(data) - self.short_by

    def readinto(self, buf):
        return self.read_result

    def close(self):
        if self.fail_close:
            raise OSError("connection reset")


class FakeFS:
    protocol = "fake"

    def __init__(self, **file_kwargs):
        self.file = FakeFile(**file_kwargs)

    def open(self, path, mode):
        return self.file
