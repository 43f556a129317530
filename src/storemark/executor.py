import logging
import threading
import time

from .counters import Counters
from .engine import WorkloadEngine, new_scratch
from .rand import CONTENT_SIZE, Random, random_string
from .store import open_store

logger = logging.getLogger("storemark.executor")

MODES = ("put", "read")


def target_path(prefix: str, name_id: int) -> str:
    return f"/{prefix}/{name_id}"


class StatsReporter:
    """Раз в interval секунд печатает и обнуляет счётчики Put/Del/Read."""

    def __init__(self, counters: Counters, interval: float = 1.0):
        self.counters = counters
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None

    def report(self) -> tuple[int, int, int]:
        put, dele, read = self.counters.reset()
        print(f"Put\t{put}\tDel\t{dele}\tRead\t{read}", flush=True)
        return put, dele, read

    def _run(self):
        self.report()
        while not self._stop.wait(self.interval):
            self.report()

    def start(self):
        self._thread = threading.Thread(target=self._run, name="stats-reporter", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()


class Worker:
    """Один поток нагрузки со своим генератором, контентом и буфером чтения."""

    def __init__(self, thread_id: int, mode: str, engine: WorkloadEngine, seed: int, count: int, stop: threading.Event):
        if mode not in MODES:
            raise ValueError(f"unknown mode {mode!r}")
        self.thread_id = thread_id
        self.mode = mode
        self.engine = engine
        self.count = count
        self.stop = stop
        self.prefix = str(thread_id)
        self.rng = Random(seed + thread_id)
        if self.rng.seed in (0, 0x7fffffff):
            # Обе точки неподвижны: генератор выдаёт одно и то же число
            logger.warning(
                "worker %d: seed %d is degenerate, content will be a single repeated byte",
                thread_id, seed + thread_id,
            )
        self.content = None
        self.scratch = None
        self.done = threading.Event()
        self.error = None
        self.completed = 0

    def run(self):
        try:
            self.content = random_string(self.rng, CONTENT_SIZE)
            if self.mode == "read":
                self.scratch = new_scratch()
            name_id = 0
            while (self.count == 0 or self.completed != self.count) and not self.stop.is_set():
                filename = target_path(self.prefix, name_id)
                if self.mode == "put":
                    self.engine.put(filename, self.content, self.rng)
                else:
                    self.engine.read(filename, self.content, self.rng, self.scratch)
                name_id += 1
                self.completed += 1
        except Exception as exc:
            logger.error("worker %d failed: %s", self.thread_id, exc)
            self.error = exc
        finally:
            logger.info("worker %d finished after %d %s ops", self.thread_id, self.completed, self.mode)
            self.done.set()


def run_workers(workers, reporter: StatsReporter, stop: threading.Event, poll_interval: float = 1.0):
    reporter.start()
    threads = []
    for w in workers:
        t = threading.Thread(target=w.run, name=f"worker-{w.thread_id}", daemon=True)
        t.start()
        threads.append(t)
    try:
        while not all(w.done.is_set() for w in workers):
            if any(w.error is not None for w in workers):
                break
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        logger.warning("interrupted, stopping workers")
    finally:
        stop.set()
        for t in threads:
            t.join()
        reporter.stop()
    for w in workers:
        if w.error is not None:
            raise w.error


def run_mark(args, store=None) -> int:
    mode = args.mode
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}")
    if store is None:
        store = open_store(args.address, **(getattr(args, "storage_options", None) or {}))
    file_size = args.file_size << 10
    counters = Counters()
    engine = WorkloadEngine(store, counters, file_size)
    stop = threading.Event()
    workers = [Worker(i, mode, engine, args.seed, args.count, stop) for i in range(args.threads)]
    reporter = StatsReporter(counters, getattr(args, "report_interval", 1.0))

    count_disp = args.count if args.count else "unbounded"
    print(
        f"Running {mode} against {store.address}: {args.threads} threads, "
        f"{count_disp} files per thread, {args.file_size} KB each, seed {args.seed}"
    )
    run_workers(workers, reporter, stop, getattr(args, "poll_interval", 1.0))

    total = sum(w.completed for w in workers)
    if args.count != 0:
        label = "Put" if mode == "put" else "Read"
        print(f"Total {label} {total}")
    return total
