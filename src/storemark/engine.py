"""Операции Put / Read / Delete над одним файлом хранилища.

Каждый вызов write/read использует случайный размер блока в
[BUF_BASE_SIZE, 2 * BUF_BASE_SIZE), чтобы не попадать всё время на границы
буферизации хранилища.
"""
from __future__ import annotations

import logging

from .counters import Counters
from .errors import ReadError, ShortWriteError, SizeMismatchError, VerifyError
from .rand import CONTENT_SIZE, Random
from .store import Store

logger = logging.getLogger("storemark.engine")

BUF_SIZE = CONTENT_SIZE
BUF_BASE_SIZE = BUF_SIZE // 2


def chunk_size(rng: Random) -> int:
    return BUF_BASE_SIZE + rng.uniform(BUF_BASE_SIZE)


def new_scratch() -> bytearray:
    return bytearray(BUF_SIZE)


def _read_chunk(f, target: str, scratch: bytearray, length: int, offset: int) -> int:
    n = f.read_into(scratch, length)
    if n is None or n < 0:
        raise ReadError(f"read {target} failed at offset {offset}: returned {n!r}")
    return n


class WorkloadEngine:
    def __init__(self, store: Store, counters: Counters, file_size: int):
        self.store = store
        self.counters = counters
        self.file_size = file_size

    def put(self, target: str, content: bytes, rng: Random):
        f = self.store.open_file(target, "w")
        view = memoryview(content)
        written = 0
        while written < self.file_size:
            w = chunk_size(rng)
            remaining = self.file_size - written
            if remaining < w:
                n = f.write(view[:remaining])
                if n != remaining:
                    raise ShortWriteError(target, remaining, n)
                written += n
                break
            n = f.write(view[:w])
            if n != w:
                raise ShortWriteError(target, w, n)
            written += n
        f.close()
        self.counters.put.inc()
        logger.debug("put %s: %d bytes", target, written)

    def read(self, target: str, content: bytes, rng: Random, scratch: bytearray | None = None):
        if scratch is None:
            scratch = new_scratch()
        f = self.store.open_file(target, "r")
        expected = memoryview(content)
        buf = memoryview(scratch)
        total = 0
        while total < self.file_size:
            r = chunk_size(rng)
            n = _read_chunk(f, target, scratch, min(r, self.file_size - total), total)
            if n == 0:
                break
            if buf[:n] != expected[:n]:
                raise VerifyError(target, total, n)
            total += n
        if total == self.file_size:
            # Файл должен закончиться ровно на file_size; размер блока не тянем
            total += _read_chunk(f, target, scratch, len(scratch), total)
        if total != self.file_size:
            raise SizeMismatchError(target, self.file_size, total)
        f.close()
        self.counters.read.inc()
        logger.debug("read %s: %d bytes verified", target, total)

    def delete(self, target: str):
        self.store.delete_file(target)
        # Счётчик удалений уменьшается, в отличие от put/read
        self.counters.delete.dec()
