import logging
import os
import signal
import threading
import time

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--reader-watchdog",
        action="store",
        default="10",
        help="Timeout in seconds after which a hung test (e.g. a reader thread that never stops) is aborted"
    )


@pytest.fixture(autouse=True)
def reader_watchdog(request):
    timeout = int(request.config.getoption('--reader-watchdog') or 10)

    def handler(signum, frame):
        raise RuntimeError(f"Test exceeded {timeout}s: a key reader is probably blocked")

    old_handler = signal.signal(signal.SIGALRM, handler)
    signal.alarm(timeout)
    try:
        yield
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, old_handler)


@pytest.fixture(autouse=True)
def reset_termkeys_logger():
    """Drop handlers installed by setup_logging() so they don't outlive the test's streams."""
    yield
    logger = logging.getLogger('termkeys')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def no_leaked_readers():
    """Fail the test if it left a reader thread running."""
    yield
    deadline = time.monotonic() + 1.0
    while time.monotonic() < deadline:
        alive = [t.name for t in threading.enumerate()
                 if t.name.startswith(("fd-", "evdev-")) and t.is_alive()]
        if not alive:
            return
        time.sleep(0.01)
    pytest.fail(f"Reader threads still running after test: {alive}")


@pytest.fixture
def wait_until():
    """Poll *predicate* until it is true or *timeout* expires."""

    def _wait(predicate, timeout=2.0, interval=0.005):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait


@pytest.fixture
def pipe():
    """An ``os.pipe()`` pair; whatever is still open is closed afterwards."""
    read_fd, write_fd = os.pipe()
    fds = {"r": read_fd, "w": write_fd}
    yield fds
    for fd in fds.values():
        try:
            os.close(fd)
        except OSError:
            pass
