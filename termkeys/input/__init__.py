"""Push-based key event sources.

``DeviceSource`` is not imported here so that importing termkeys never
touches evdev; import it from ``termkeys.input.device_source``.
"""

from termkeys.input.aio_source import AsyncIterableSource, read_chunks
from termkeys.input.fd_source import FileDescriptorSource
from termkeys.input.source import KeySource, Subscription
from termkeys.input.stream import KeyStream

__all__ = [
    'AsyncIterableSource',
    'FileDescriptorSource',
    'KeySource',
    'KeyStream',
    'Subscription',
    'read_chunks',
]
