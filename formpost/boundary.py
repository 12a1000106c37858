from __future__ import annotations

import itertools
import time
from collections.abc import Callable

_counter = itertools.count()


def _clock() -> int:
    # Mix in a counter so two boundaries drawn within one clock tick differ.
    return time.monotonic_ns() + next(_counter)


class BoundaryGenerator:
    """
    Produces boundary tokens as uppercase hexadecimal.

    The token is only probably unique per process. It is not checked
    against the payload it delimits.

    Args:
        source: Zero-argument callable returning an int. Defaults to the
            process monotonic clock. Tests inject a fixed sequence here.
    """

    def __init__(self, source: Callable[[], int] | None = None) -> None:
        self.source = source or _clock

    def generate(self) -> str:
        return format(self.source(), "X")


default_generator = BoundaryGenerator()


def generate_boundary() -> str:
    return default_generator.generate()
