"""Детерминированный генератор и базовый контент для воркеров.

Генератор - минимальный стандарт Park-Miller (как в LevelDB): одни и те же
seed дают одинаковую последовательность в любой реализации, поэтому файлы,
записанные одним прогоном, можно проверить другим.
"""

CONTENT_SIZE = 1 << 20

_M = 2147483647
_A = 16807


class Random:
    def __init__(self, seed: int):
        self.seed = seed & 0x7fffffff

    def next(self) -> int:
        product = self.seed * _A
        seed = (product >> 31) + (product & _M)
        if seed > _M:
            seed -= _M
        self.seed = seed
        return seed

    def uniform(self, n: int) -> int:
        # Без rejection sampling: смещение по модулю сохраняется намеренно
        return self.next() % n


def random_string(rng: Random, size: int = CONTENT_SIZE) -> bytes:
    """Строит буфер из `size` байт: (' ' + next()) mod 256 для каждой позиции."""
    out = bytearray(size)
    nxt = rng.next
    base = ord(" ")
    for i in range(size):
        out[i] = (base + nxt()) & 0xff
    return bytes(out)


def content_for(seed: int, size: int = CONTENT_SIZE) -> bytes:
    return random_string(Random(seed), size)
