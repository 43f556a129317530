class MarkError(Exception):
    """Базовая ошибка прогона: любая из них означает дефект хранилища."""


class StoreOpenError(MarkError):
    pass


class FileOpenError(MarkError):
    pass


class ShortWriteError(MarkError):
    def __init__(self, path: str, requested: int, written: int):
        super().__init__(f"short write on {path}: requested {requested}, written {written}")
        self.path = path
        self.requested = requested
        self.written = written


class CloseError(MarkError):
    pass


class VerifyError(MarkError):
    def __init__(self, path: str, offset: int, length: int):
        super().__init__(f"content mismatch on {path}: {length} bytes at offset {offset}")
        self.path = path
        self.offset = offset
        self.length = length


class SizeMismatchError(MarkError):
    def __init__(self, path: str, expected: int, actual: int):
        super().__init__(f"size mismatch on {path}: expected {expected} bytes, read {actual}")
        self.path = path
        self.expected = expected
        self.actual = actual


class DeleteError(MarkError):
    pass


class ReadError(MarkError):
    pass
