"""termkeys: buffered, synchronously queryable terminal key input.

Key events arrive asynchronously from a :class:`KeySource`; a polling loop
asks ``keys.is_pressed(...)`` and calls ``keys.clear()`` once per frame.
"""

from termkeys.__version__ import __version__
from termkeys.core.buffer import MAX_CODES, EventBuffer, KeyEvent
from termkeys.core.keys import AsyncBufferedKeys, BufferedKeys, SyncBufferedKeys
from termkeys.input.aio_source import AsyncIterableSource, read_chunks
from termkeys.input.fd_source import FileDescriptorSource
from termkeys.input.source import KeySource, Subscription
from termkeys.input.stream import KeyStream

__all__ = [
    'MAX_CODES',
    'AsyncBufferedKeys',
    'AsyncIterableSource',
    'BufferedKeys',
    'EventBuffer',
    'FileDescriptorSource',
    'KeyEvent',
    'KeySource',
    'KeyStream',
    'Subscription',
    'SyncBufferedKeys',
    '__version__',
    'read_chunks',
]
