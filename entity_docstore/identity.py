import itertools
import os
import random
import struct
import time
import typing


_COUNTER_MODULO = 0xFFFFFF + 1


class IdentityGenerator:
    """Issues 12-byte ObjectId-shaped identifiers rendered as 24 hex characters.

    Layout: 4-byte big-endian unix timestamp, 5-byte random value chosen once per
    process, 3-byte counter starting at a random offset.
    """

    def __init__(self) -> None:
        self._pid: typing.Optional[int] = None
        self._process_component = b""
        self._counter: typing.Iterator[int] = iter(())
        self._reset()

    def _reset(self) -> None:
        self._pid = os.getpid()
        self._process_component = os.urandom(5)
        self._counter = itertools.count(random.randint(0, _COUNTER_MODULO - 1))

    def new_id(self) -> str:
        if os.getpid() != self._pid:
            # forked child must not share the parent's process component
            self._reset()
        counter = next(self._counter) % _COUNTER_MODULO
        raw = struct.pack(">I", int(time.time()) & 0xFFFFFFFF) + self._process_component + counter.to_bytes(3, "big")
        return raw.hex()

    def generate(self, primary_key_fields: typing.Sequence[str]) -> typing.Optional[str]:
        if len(primary_key_fields) != 1:
            return None
        return self.new_id()


default_generator = IdentityGenerator()
