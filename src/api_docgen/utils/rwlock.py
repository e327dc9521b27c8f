"""Reader/writer lock guarding the endpoint registry."""

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Condition


class RWLock:
    """Many concurrent readers or one writer.

    Waiting writers do not block new readers.
    """

    def __init__(self) -> None:
        self._cond = Condition()
        self._readers = 0
        self._writer = False

    @contextmanager
    def shared(self) -> Iterator[None]:
        with self._cond:
            self._cond.wait_for(lambda: not self._writer)
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._cond:
            self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
