# tagged_ad/calculus/series.py
from __future__ import annotations
from itertools import accumulate, islice
from typing import Any, Callable, Iterator, List

from ..ops.arithmetic import add


class Series:
    """
    Lazy, restartable infinite sequence.

    A Series holds a factory returning a fresh iterator, so every traversal
    starts from the first term and nothing past the last requested term is
    ever computed:
        s = Series(lambda: itertools.count())
        s.take(3) -> [0, 1, 2]
        s.take(3) -> [0, 1, 2]

    A series of callables can itself be applied: s(x) is the series of
    term(x).
    """

    __slots__ = ("_factory", "name")

    def __init__(self, factory: Callable[[], Iterator[Any]], name: str = "series"):
        self._factory = factory
        self.name = name

    def __iter__(self):
        return iter(self._factory())

    def __repr__(self):
        return f"Series({self.name})"

    def take(self, n: int) -> List[Any]:
        """First `n` terms."""
        return list(islice(self, n))

    def __getitem__(self, i):
        if isinstance(i, slice):
            if i.stop is None or (i.start or 0) < 0 or i.stop < 0:
                raise ValueError("Series slices need a non-negative, finite stop")
            return list(islice(self, i.start, i.stop, i.step))
        if i < 0:
            raise IndexError("Series has no last element to count back from")
        return next(islice(self, i, None))

    def fmap(self, fn: Callable[[Any], Any], name: str = None) -> "Series":
        return Series(lambda: map(fn, self), name=name or f"(map {self.name})")

    def partial_sums(self) -> "Series":
        """s_n = t_0 + ... + t_n."""
        return Series(lambda: accumulate(self, add), name=f"(partial-sums {self.name})")

    def __call__(self, *args):
        return self.fmap(lambda term: term(*args), name=f"({self.name} applied)")
