"""Mixer device access: descriptor types and the NetBSD ioctl backend."""
import ctypes
import fcntl
import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_MIXER_DEVICE = "/dev/mixer"

MAX_AUDIO_DEV_LEN = 16
MAX_MEMBERS = 32
MAX_CHANNELS = 8

# Sentinel used by the kernel for "no next/prev control"
AUDIO_MIXER_LAST = -1


class ControlType(IntEnum):
    """Descriptor type tags, numbered as in sys/audioio.h."""
    CLASS = 0
    ENUM = 1
    SET = 2
    VALUE = 3


class MixerDeviceError(OSError):
    """A read, write or enumeration request was rejected by the device."""

    def __init__(self, operation: str, dev: int, reason: str = ""):
        self.operation = operation
        self.dev = dev
        self.reason = reason
        super().__init__(f"{operation} {dev} failed: {reason}")


@dataclass
class Descriptor:
    """One entry of the device's flat control enumeration.

    ``members`` holds (label, ordinal) pairs for ENUM and (label, bitmask)
    pairs for SET. ``num_channels`` and ``delta`` only apply to VALUE.
    """
    index: int
    type: ControlType
    label: str
    mixer_class: int
    prev: int = AUDIO_MIXER_LAST
    next: int = AUDIO_MIXER_LAST
    members: List[Tuple[str, int]] = field(default_factory=list)
    num_channels: int = 0
    delta: int = 0


# A control value is an ordinal (ENUM), a bitmask (SET) or a level list (VALUE)
ControlValue = Union[int, List[int]]


class MixerDevice:
    """Contract every mixer backend implements.

    Backends are context managers so the handle is released on every
    exit path.
    """

    def enumerate(self) -> Iterator[Descriptor]:
        raise NotImplementedError

    def read_control(self, index: int, type: ControlType,
                     num_channels: int = 0) -> ControlValue:
        raise NotImplementedError

    def write_control(self, index: int, type: ControlType, value: ControlValue):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


# ── sys/audioio.h mirrors ────────────────────────────────────

class AudioMixerName(ctypes.Structure):
    _fields_ = [
        ("name", ctypes.c_char * MAX_AUDIO_DEV_LEN),
        ("msg_id", ctypes.c_int),
    ]


class EnumMember(ctypes.Structure):
    _fields_ = [("label", AudioMixerName), ("ord", ctypes.c_int)]


class SetMember(ctypes.Structure):
    _fields_ = [("label", AudioMixerName), ("mask", ctypes.c_int)]


class AudioMixerEnum(ctypes.Structure):
    _fields_ = [("num_mem", ctypes.c_int), ("member", EnumMember * MAX_MEMBERS)]


class AudioMixerSet(ctypes.Structure):
    _fields_ = [("num_mem", ctypes.c_int), ("member", SetMember * MAX_MEMBERS)]


class AudioMixerValue(ctypes.Structure):
    _fields_ = [
        ("units", AudioMixerName),
        ("num_channels", ctypes.c_int),
        ("delta", ctypes.c_int),
    ]


class _DevinfoUnion(ctypes.Union):
    _fields_ = [("e", AudioMixerEnum), ("s", AudioMixerSet), ("v", AudioMixerValue)]


class MixerDevinfo(ctypes.Structure):
    _fields_ = [
        ("index", ctypes.c_int),
        ("label", AudioMixerName),
        ("type", ctypes.c_int),
        ("mixer_class", ctypes.c_int),
        ("next", ctypes.c_int),
        ("prev", ctypes.c_int),
        ("un", _DevinfoUnion),
    ]


class MixerLevel(ctypes.Structure):
    _fields_ = [
        ("num_channels", ctypes.c_int),
        ("level", ctypes.c_ubyte * MAX_CHANNELS),
    ]


class _CtrlUnion(ctypes.Union):
    _fields_ = [("ord", ctypes.c_int), ("mask", ctypes.c_int), ("value", MixerLevel)]


class MixerCtrl(ctypes.Structure):
    _fields_ = [("dev", ctypes.c_int), ("type", ctypes.c_int), ("un", _CtrlUnion)]


_IOC_INOUT = 0xC0000000
_IOCPARM_MASK = 0x1FFF


def _iowr(group: str, num: int, struct_type) -> int:
    """BSD _IOWR(group, num, type) request code."""
    size = ctypes.sizeof(struct_type)
    return _IOC_INOUT | ((size & _IOCPARM_MASK) << 16) | (ord(group) << 8) | num


AUDIO_MIXER_READ = _iowr("M", 0, MixerCtrl)
AUDIO_MIXER_WRITE = _iowr("M", 1, MixerCtrl)
AUDIO_MIXER_DEVINFO = _iowr("M", 2, MixerDevinfo)


def _label(name: AudioMixerName) -> str:
    return name.name.decode("ascii", errors="replace")


def devinfo_to_descriptor(info: MixerDevinfo) -> Optional[Descriptor]:
    """Convert a kernel devinfo record to a Descriptor.

    Returns None for a record whose type tag is not a known control type.
    """
    try:
        ctype = ControlType(info.type)
    except ValueError:
        return None

    desc = Descriptor(
        index=info.index,
        type=ctype,
        label=_label(info.label),
        mixer_class=info.mixer_class,
        prev=info.prev,
        next=info.next,
    )
    if ctype == ControlType.ENUM:
        count = max(0, min(info.un.e.num_mem, MAX_MEMBERS))
        desc.members = [(_label(m.label), m.ord) for m in info.un.e.member[:count]]
    elif ctype == ControlType.SET:
        count = max(0, min(info.un.s.num_mem, MAX_MEMBERS))
        desc.members = [(_label(m.label), m.mask) for m in info.un.s.member[:count]]
    elif ctype == ControlType.VALUE:
        desc.num_channels = info.un.v.num_channels
        desc.delta = info.un.v.delta
    return desc


class NetBSDMixerDevice(MixerDevice):
    """Mixer backend talking to a NetBSD audio(4) mixer device via ioctl."""

    def __init__(self, fd: int, path: str = DEFAULT_MIXER_DEVICE):
        self.fd: Optional[int] = fd
        self.path = path

    @classmethod
    def open(cls, path: str = DEFAULT_MIXER_DEVICE) -> "NetBSDMixerDevice":
        """Open the mixer device read/write.

        Raises:
            OSError: If the device node cannot be opened.
        """
        return cls(os.open(path, os.O_RDWR), path)

    def _ioctl(self, request: int, arg):
        if self.fd is None:
            raise MixerDeviceError("ioctl", -1, "device is closed")
        fcntl.ioctl(self.fd, request, arg)

    def enumerate(self) -> Iterator[Descriptor]:
        """Yield descriptors in index order until the kernel reports the end."""
        index = 0
        while True:
            info = MixerDevinfo()
            info.index = index
            try:
                self._ioctl(AUDIO_MIXER_DEVINFO, info)
            except OSError:
                return
            desc = devinfo_to_descriptor(info)
            if desc is None:
                logger.debug("control %d: unknown control type %d", index, info.type)
            else:
                yield desc
            index += 1

    def read_control(self, index: int, type: ControlType,
                     num_channels: int = 0) -> ControlValue:
        ctrl = MixerCtrl()
        ctrl.dev = index
        ctrl.type = type
        if type == ControlType.VALUE:
            ctrl.un.value.num_channels = num_channels
        try:
            self._ioctl(AUDIO_MIXER_READ, ctrl)
        except OSError as e:
            raise MixerDeviceError("AUDIO_MIXER_READ", index, e.strerror or str(e))

        if type == ControlType.ENUM:
            return ctrl.un.ord
        if type == ControlType.SET:
            return ctrl.un.mask
        return list(ctrl.un.value.level[:num_channels])

    def write_control(self, index: int, type: ControlType, value: ControlValue):
        ctrl = MixerCtrl()
        ctrl.dev = index
        ctrl.type = type
        if type == ControlType.ENUM:
            ctrl.un.ord = value
        elif type == ControlType.SET:
            ctrl.un.mask = value
        else:
            levels = list(value)[:MAX_CHANNELS]
            ctrl.un.value.num_channels = len(levels)
            for chan, level in enumerate(levels):
                ctrl.un.value.level[chan] = level
        try:
            self._ioctl(AUDIO_MIXER_WRITE, ctrl)
        except OSError as e:
            raise MixerDeviceError("AUDIO_MIXER_WRITE", index, e.strerror or str(e))

    def close(self):
        """Release the device handle."""
        if self.fd is not None:
            try:
                os.close(self.fd)
            finally:
                self.fd = None
