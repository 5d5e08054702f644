"""Tests for termkeys.input.device_source: evdev device replaced by a fake.

The fake device is backed by a pipe so ``selectors`` sees real readiness.
"""

from __future__ import annotations

import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

evdev = pytest.importorskip("evdev")
from evdev import ecodes  # noqa: E402

from termkeys import AsyncBufferedKeys  # noqa: E402
from termkeys.input.device_source import DeviceSource  # noqa: E402


class FakeDevice:
    def __init__(self, read_fd: int, path: str = "/dev/input/event7"):
        self._read_fd = read_fd
        self.path = path
        self.name = "Fake Keyboard"
        self.pending: list = []
        self.grab = MagicMock()
        self.ungrab = MagicMock()
        self.close = MagicMock()
        self.fail_with: Exception | None = None

    def fileno(self) -> int:
        return self._read_fd

    def read(self):
        os.read(self._read_fd, 1024)
        if self.fail_with is not None:
            raise self.fail_with
        events, self.pending = self.pending, []
        return events


def _event(code: int, value: int, type_: int | None = None):
    return SimpleNamespace(type=ecodes.EV_KEY if type_ is None else type_, code=code, value=value)


@pytest.fixture
def device(pipe):
    return FakeDevice(pipe["r"])


def _push(pipe, device, *events):
    device.pending.extend(events)
    os.write(pipe["w"], b"!")


def test_key_down_delivered_as_single_code(pipe, device, wait_until):
    received = []
    sub = DeviceSource(device, poll_timeout=0.01).listen(received.append)
    try:
        _push(pipe, device, _event(ecodes.KEY_Q, 1))
        assert wait_until(lambda: received)
        assert received == [(ecodes.KEY_Q,)]
    finally:
        sub.cancel()


def test_release_repeat_and_non_key_events_ignored(pipe, device, wait_until):
    received = []
    sub = DeviceSource(device, poll_timeout=0.01).listen(received.append)
    try:
        _push(
            pipe, device,
            _event(ecodes.KEY_A, 0),
            _event(ecodes.KEY_A, 2),
            _event(0, 0, type_=ecodes.EV_SYN),
            _event(ecodes.KEY_W, 1),
        )
        assert wait_until(lambda: received)
        assert received == [(ecodes.KEY_W,)]
    finally:
        sub.cancel()


def test_buffered_keys_over_device(pipe, device, wait_until):
    keys = AsyncBufferedKeys(DeviceSource(device, poll_timeout=0.01))
    _push(pipe, device, _event(ecodes.KEY_UP, 1))
    assert wait_until(lambda: keys.is_pressed(ecodes.KEY_UP))
    keys.cancel()
    assert not keys.is_any_pressed


def test_grab_and_ungrab(device):
    source = DeviceSource(device, grab=True, poll_timeout=0.01)
    sub = source.listen(lambda codes: None)
    device.grab.assert_called_once()
    sub.cancel()
    device.ungrab.assert_called_once()


def test_no_grab_by_default(device):
    sub = DeviceSource(device, poll_timeout=0.01).listen(lambda codes: None)
    sub.cancel()
    device.grab.assert_not_called()
    device.ungrab.assert_not_called()


def test_unplugged_device_reports_error(pipe, device, wait_until):
    errors = []
    DeviceSource(device, poll_timeout=0.01).listen(lambda codes: None, on_error=errors.append)
    device.fail_with = OSError(19, "No such device")
    os.write(pipe["w"], b"!")
    assert wait_until(lambda: errors)
    assert errors[0].errno == 19


def test_second_listener_rejected(device):
    source = DeviceSource(device, poll_timeout=0.01)
    sub = source.listen(lambda codes: None)
    try:
        with pytest.raises(RuntimeError):
            source.listen(lambda codes: None)
    finally:
        sub.cancel()


def test_close_stops_reader_and_closes_device(device):
    with DeviceSource(device, poll_timeout=0.01) as source:
        source.listen(lambda codes: None)
    device.close.assert_called_once()


def test_path_opens_input_device(monkeypatch, device):
    opened = []

    def fake_input_device(path):
        opened.append(path)
        return device

    monkeypatch.setattr(evdev, "InputDevice", fake_input_device)
    source = DeviceSource("/dev/input/event7")
    assert opened == ["/dev/input/event7"]
    assert source.device is device
