"""Клиент хранилища поверх fsspec.

Адрес хранилища - любой URL fsspec (memory://bench, file:///mnt/x, gs://bucket/prefix);
пути файлов прогона добавляются к корню из адреса.
"""
from __future__ import annotations

import logging

import fsspec
from fsspec.utils import get_protocol

from .errors import CloseError, DeleteError, FileOpenError, StoreOpenError

logger = logging.getLogger("storemark.store")

MODES = {"w": "wb", "r": "rb"}


class StoreFile:
    def __init__(self, path: str, fh, permissions: int, replication: int):
        self.path = path
        self.permissions = permissions
        self.replication = replication
        self._fh = fh

    def write(self, data) -> int:
        written = self._fh.write(data)
        # Некоторые файловые объекты fsspec возвращают None вместо длины
        return len(data) if written is None else written

    def read_into(self, buffer, length: int) -> int:
        return self._fh.readinto(memoryview(buffer)[:length])

    def close(self):
        try:
            self._fh.close()
        except Exception as exc:
            raise CloseError(f"close {self.path} failed: {exc}") from exc


class Store:
    def __init__(self, fs, root: str, address: str):
        self.fs = fs
        self.root = root.rstrip("/")
        self.address = address

    def full_path(self, path: str) -> str:
        return f"{self.root}/{path.lstrip('/')}"

    def open_file(self, path: str, mode: str, permissions: int = 0o664, replication: int = -1) -> StoreFile:
        if mode not in MODES:
            raise ValueError(f"unknown open mode {mode!r}")
        try:
            fh = self.fs.open(self.full_path(path), MODES[mode])
        except Exception as exc:
            raise FileOpenError(f"open {path} ({mode}) failed: {exc}") from exc
        return StoreFile(path, fh, permissions, replication)

    def delete_file(self, path: str):
        try:
            self.fs.rm(self.full_path(path))
        except Exception as exc:
            raise DeleteError(f"delete {path} failed: {exc}") from exc

    # Проверка результатов прогона (тесты, ручная отладка); нагрузка их не вызывает
    def exists(self, path: str) -> bool:
        return self.fs.exists(self.full_path(path))

    def size(self, path: str) -> int:
        return self.fs.size(self.full_path(path))


def open_store(address: str, **storage_options) -> Store:
    if get_protocol(address) in ("file", "local"):
        # Для локального диска каталоги /<thread>/ создаются при открытии
        storage_options.setdefault("auto_mkdir", True)
    try:
        fs, root = fsspec.core.url_to_fs(address, **storage_options)
    except Exception as exc:
        raise StoreOpenError(f"Open store {address} fail: {exc}") from exc
    logger.info("Opened store %s (protocol=%s, root=%r)", address, fs.protocol, root)
    return Store(fs, root, address)
