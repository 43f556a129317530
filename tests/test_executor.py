import logging
import threading
import time
from argparse import Namespace

import pytest

from storemark.counters import Counters
from storemark.engine import WorkloadEngine
from storemark.errors import FileOpenError, VerifyError
from storemark.executor import StatsReporter, Worker, run_mark, target_path
from storemark.rand import Random, content_for
from storemark.store import open_store

MB = 1 << 20


def make_args(address, **overrides):
    values = dict(
        mode="put",
        address=address,
        count=3,
        threads=1,
        seed=301,
        file_size=1024,
        storage_options={},
        poll_interval=0.01,
        report_interval=0.05,
    )
    values.update(overrides)
    return Namespace(**values)


def test_target_path():
    assert target_path("0", 0) == "/0/0"
    assert target_path("12", 7) == "/12/7"


def test_reporter_prints_and_resets(capsys):
    counters = Counters()
    for _ in range(3):
        counters.put.inc()
    counters.read.inc()
    reporter = StatsReporter(counters)
    assert reporter.report() == (3, 0, 1)
    assert capsys.readouterr().out == "Put\t3\tDel\t0\tRead\t1\n"
    assert counters.snapshot() == (0, 0, 0)


def test_reporter_ticks_until_stopped(capsys):
    reporter = StatsReporter(Counters(), interval=0.01)
    reporter.start()
    time.sleep(0.1)
    reporter.stop()
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) >= 2
    assert all(line == "Put\t0\tDel\t0\tRead\t0" for line in lines)
    assert not reporter._thread.is_alive()


def test_worker_unknown_mode(memory_store):
    engine = WorkloadEngine(memory_store, Counters(), MB)
    with pytest.raises(ValueError):
        Worker(0, "delete", engine, 301, 1, threading.Event())


def test_unbounded_worker_stops_on_request(memory_store):
    engine = WorkloadEngine(memory_store, Counters(), 1024)
    stop = threading.Event()
    worker = Worker(0, "put", engine, 301, 0, stop)
    t = threading.Thread(target=worker.run)
    t.start()
    deadline = time.time() + 30
    while worker.completed < 2 and time.time() < deadline:
        time.sleep(0.01)
    stop.set()
    t.join()
    assert worker.done.is_set()
    assert worker.error is None
    assert worker.completed >= 2
    assert memory_store.exists("/0/1")


def test_end_to_end_put_then_read(memory_address, capsys):
    assert run_mark(make_args(memory_address)) == 3
    out = capsys.readouterr().out
    assert "Total Put 3" in out
    assert "1 threads, 3 files per thread, 1024 KB each, seed 301" in out
    assert "Total Read" not in out

    store = open_store(memory_address)
    content = content_for(301)
    for i in range(3):
        path = f"/0/{i}"
        assert store.size(path) == MB
        assert store.fs.cat(store.full_path(path))[:524288] == content[:524288]
    assert not store.exists("/0/3")

    assert run_mark(make_args(memory_address, mode="read")) == 3
    assert "Total Read 3" in capsys.readouterr().out


def test_counters_reach_put_count_then_reset(memory_store, worker0, capsys):
    content, state = worker0
    counters = Counters()
    engine = WorkloadEngine(memory_store, counters, 1024)
    rng = Random(state)
    for i in range(3):
        engine.put(f"/0/{i}", content, rng)
    assert counters.put.get() == 3
    StatsReporter(counters).report()
    assert capsys.readouterr().out == "Put\t3\tDel\t0\tRead\t0\n"
    assert counters.snapshot() == (0, 0, 0)


def test_multi_thread_namespaces(memory_address):
    assert run_mark(make_args(memory_address, threads=3, count=2, file_size=64)) == 6
    store = open_store(memory_address)
    for thread_id in range(3):
        for i in range(2):
            assert store.size(f"/{thread_id}/{i}") == 64 << 10
    assert run_mark(make_args(memory_address, mode="read", threads=3, count=2, file_size=64)) == 6


def test_read_failure_is_raised(memory_address):
    with pytest.raises(FileOpenError):
        run_mark(make_args(memory_address, mode="read", threads=2))


def test_read_with_wrong_seed_fails(memory_address):
    run_mark(make_args(memory_address, count=1))
    with pytest.raises(VerifyError):
        run_mark(make_args(memory_address, mode="read", count=1, seed=302))


def test_worker_content_matches_seed(memory_store):
    engine = WorkloadEngine(memory_store, Counters(), 10)
    worker = Worker(2, "put", engine, 301, 1, threading.Event())
    worker.run()
    assert worker.content == content_for(303)
    assert isinstance(worker.rng, Random)


@pytest.mark.parametrize("seed", [0, 0x7fffffff])
def test_degenerate_seed_is_reported(memory_store, caplog, seed):
    engine = WorkloadEngine(memory_store, Counters(), 10)
    with caplog.at_level(logging.WARNING, logger="storemark.executor"):
        Worker(0, "put", engine, seed, 1, threading.Event())
    assert "degenerate" in caplog.text


def test_regular_seed_is_not_reported(memory_store, caplog):
    engine = WorkloadEngine(memory_store, Counters(), 10)
    with caplog.at_level(logging.WARNING, logger="storemark.executor"):
        Worker(1, "put", engine, 301, 1, threading.Event())
    assert "degenerate" not in caplog.text
