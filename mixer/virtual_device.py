"""In-memory mixer device used as a test double, with injectable failures."""
from typing import Dict, Iterable, Iterator, List, Optional, Set

from mixer.device import (
    ControlType,
    ControlValue,
    Descriptor,
    MixerDevice,
    MixerDeviceError,
)


class VirtualMixerDevice(MixerDevice):
    """A mixer whose descriptors and values live in a dict.

    Indices listed in ``failing_reads``/``failing_writes`` make the
    corresponding request raise MixerDeviceError, the same way the kernel
    rejects a request.
    """

    def __init__(self, descriptors: Iterable[Descriptor],
                 values: Optional[Dict[int, ControlValue]] = None):
        self.descriptors: List[Descriptor] = list(descriptors)
        self.values: Dict[int, ControlValue] = {}
        self.failing_reads: Set[int] = set()
        self.failing_writes: Set[int] = set()
        self.writes: List[tuple] = []
        self.closed = False

        for desc in self.descriptors:
            if desc.type == ControlType.VALUE:
                self.values[desc.index] = [0] * max(desc.num_channels, 0)
            elif desc.type in (ControlType.ENUM, ControlType.SET):
                self.values[desc.index] = desc.members[0][1] if desc.members else 0
        if values:
            for index, value in values.items():
                self.values[index] = list(value) if isinstance(value, list) else value

    def enumerate(self) -> Iterator[Descriptor]:
        return iter(self.descriptors)

    def read_control(self, index: int, type: ControlType,
                     num_channels: int = 0) -> ControlValue:
        if index in self.failing_reads or index not in self.values:
            raise MixerDeviceError("AUDIO_MIXER_READ", index, "Invalid argument")
        value = self.values[index]
        if type == ControlType.VALUE:
            return list(value)[:num_channels]
        return value

    def write_control(self, index: int, type: ControlType, value: ControlValue):
        if index in self.failing_writes or index not in self.values:
            raise MixerDeviceError("AUDIO_MIXER_WRITE", index, "Invalid argument")
        if type == ControlType.VALUE:
            value = list(value)
        self.values[index] = value
        self.writes.append((index, type, value))

    def close(self):
        self.closed = True
