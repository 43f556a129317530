import threading


class Counter:
    def __init__(self):
        self._lock = threading.Lock()
        self._value = 0

    def inc(self, n: int = 1):
        with self._lock:
            self._value += n

    def dec(self, n: int = 1):
        with self._lock:
            self._value -= n

    def get(self) -> int:
        with self._lock:
            return self._value

    def set(self, value: int):
        with self._lock:
            self._value = value

    def reset(self) -> int:
        """Атомарно возвращает текущее значение и обнуляет счётчик."""
        with self._lock:
            value = self._value
            self._value = 0
            return value


class Counters:
    def __init__(self):
        self.put = Counter()
        self.read = Counter()
        self.delete = Counter()

    def snapshot(self) -> tuple[int, int, int]:
        return self.put.get(), self.delete.get(), self.read.get()

    def reset(self) -> tuple[int, int, int]:
        # Порядок как в строке статистики: Put, Del, Read
        return self.put.reset(), self.delete.reset(), self.read.reset()
