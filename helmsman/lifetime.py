"""
Helmsman console lifetime helpers.

- ExitSignal: a waitable flag raised by SIGINT (ctrl+c) or SIGTERM while it is
  installed. Installing it replaces the default KeyboardInterrupt behaviour, so
  a long running operation can poll or wait on it and shut down cleanly.
- run(action): runs action(signal) once per process with an installed ExitSignal.
- main(component): process sys.argv against a component and return an exit status.

Example
    >>> def serve(signal):
    ...     start()
    ...     signal.wait()  # until ctrl+c
    ...     stop()
    >>> run(serve)
"""
import signal as signals
import threading

from .drivers import Driver
from .utils import Unset


class ExitSignal:
    """
    Flag set when the process is asked to stop.

    Handlers are only installed from the main thread (a Python restriction);
    elsewhere the signal can still be set by hand.
    """

    def __init__(self, /, *numbers):
        self._numbers = numbers or (signals.SIGINT, signals.SIGTERM)
        self._event = threading.Event()
        self._previous = {}

    def _handler(self, number, frame):
        self._event.set()

    def install(self):
        if threading.current_thread() is not threading.main_thread():
            return self
        for number in self._numbers:
            if number not in self._previous:
                self._previous[number] = signals.signal(number, self._handler)
        return self

    def uninstall(self):
        while self._previous:
            number, previous = self._previous.popitem()
            signals.signal(number, previous)

    def set(self):
        self._event.set()

    def is_set(self):
        return self._event.is_set()

    def wait(self, timeout=None):
        """Block until the signal is set (or timeout expires); return is_set()."""
        return self._event.wait(timeout)

    def __enter__(self):
        return self.install()

    def __exit__(self, *exception):
        self.uninstall()

    def __repr__(self):
        return f"exit-signal(set={self.is_set()})"


_lock = threading.Lock()
_ran = False


def run(action, /):
    """
    Run action(signal) once for the whole process.

    A second call raises RuntimeError. The signal handlers are restored when
    action returns or raises; its return value is passed through.
    """
    global _ran
    if not callable(action):
        raise TypeError("run() argument must be callable")
    with _lock:
        if _ran:
            raise RuntimeError("run() has already been called in this process")
        _ran = True
    with ExitSignal() as signal:
        return action(signal)


def main(component, arguments=Unset, /):
    """
    Process arguments (sys.argv[1:] by default) and return an exit status.

        if __name__ == "__main__":
            sys.exit(main(Svn()))
    """
    return 0 if Driver(component).process(arguments) else 1


__all__ = (
    "ExitSignal",
    "run",
    "main",
)
