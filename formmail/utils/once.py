import threading


class TryOnce:
    """Run an initializer once, but only count calls that did not raise."""

    def __init__(self):
        self._lock = threading.Lock()
        self._done = False

    def try_do(self, fn):
        """Call ``fn`` unless an earlier call already completed.

        Exceptions from ``fn`` propagate and leave the guard open, so the
        next caller tries again.
        """
        if self._done:
            return
        with self._lock:
            if self._done:
                return
            fn()
            self._done = True

    def reset(self):
        with self._lock:
            self._done = False
