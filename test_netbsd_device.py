"""Tests for the audio(4) structure mirrors and the ioctl backend."""
import ctypes
import os

import pytest

from mixer.catalog import build_catalog
from mixer.device import (
    AUDIO_MIXER_DEVINFO,
    AUDIO_MIXER_READ,
    AUDIO_MIXER_WRITE,
    ControlType,
    MixerCtrl,
    MixerDevice,
    MixerDeviceError,
    MixerDevinfo,
    NetBSDMixerDevice,
    devinfo_to_descriptor,
)


class TestStructures:

    def test_struct_sizes(self):
        assert ctypes.sizeof(MixerCtrl) == 20
        assert ctypes.sizeof(MixerDevinfo) == 812

    def test_request_codes(self):
        assert AUDIO_MIXER_READ == 0xC0144D00
        assert AUDIO_MIXER_WRITE == 0xC0144D01
        assert AUDIO_MIXER_DEVINFO == 0xC32C4D02


class TestDevinfoConversion:

    def test_enum(self):
        info = MixerDevinfo()
        info.index = 4
        info.label.name = b"mute"
        info.type = ControlType.ENUM
        info.mixer_class = 0
        info.prev = 3
        info.next = -1
        info.un.e.num_mem = 2
        info.un.e.member[0].label.name = b"off"
        info.un.e.member[0].ord = 0
        info.un.e.member[1].label.name = b"on"
        info.un.e.member[1].ord = 1

        desc = devinfo_to_descriptor(info)
        assert desc.index == 4
        assert desc.type == ControlType.ENUM
        assert desc.label == "mute"
        assert desc.prev == 3
        assert desc.members == [("off", 0), ("on", 1)]

    def test_value(self):
        info = MixerDevinfo()
        info.index = 3
        info.label.name = b"master"
        info.type = ControlType.VALUE
        info.mixer_class = 1
        info.prev = -1
        info.un.v.num_channels = 2
        info.un.v.delta = 16

        desc = devinfo_to_descriptor(info)
        assert desc.type == ControlType.VALUE
        assert desc.num_channels == 2
        assert desc.delta == 16
        assert desc.members == []

    def test_full_length_label(self):
        info = MixerDevinfo()
        info.label.name = b"abcdefghijklmnop"
        info.type = ControlType.CLASS
        assert devinfo_to_descriptor(info).label == "abcdefghijklmnop"

    def test_unknown_type(self):
        info = MixerDevinfo()
        info.type = 42
        assert devinfo_to_descriptor(info) is None


class ScriptedMixerDevice(NetBSDMixerDevice):
    """Answers AUDIO_MIXER_DEVINFO from a list of (type, label, class) records."""

    def __init__(self, records):
        super().__init__(fd=-1, path="scripted")
        self.records = records

    def _ioctl(self, request, arg):
        if arg.index >= len(self.records):
            raise OSError("no such control")
        arg.type, label, arg.mixer_class = self.records[arg.index]
        arg.label.name = label
        arg.prev = arg.next = -1
        if arg.type == ControlType.VALUE:
            arg.un.v.num_channels = 2


def test_enumerate_skips_unknown_types():
    device = ScriptedMixerDevice([
        (ControlType.CLASS, b"outputs", 0),
        (9, b"mystery", 0),
        (ControlType.VALUE, b"master", 0),
    ])
    descriptors = list(device.enumerate())
    assert [d.index for d in descriptors] == [0, 2]

    catalog = build_catalog(descriptors)
    assert catalog.get_control(1) is None
    assert catalog.get_control(2).name == "master"
    assert catalog.get_control(2).num_channels == 2


class TestNetBSDMixerDevice:

    def test_open_missing_device(self, tmp_path):
        with pytest.raises(OSError):
            NetBSDMixerDevice.open(str(tmp_path / "mixer"))

    def test_context_manager_closes(self, tmp_path):
        path = tmp_path / "mixer"
        path.write_bytes(b"")
        with NetBSDMixerDevice.open(str(path)) as device:
            fd = device.fd
            assert fd is not None
        assert device.fd is None
        with pytest.raises(OSError):
            os.fstat(fd)

    def test_requests_on_non_mixer_fail(self, tmp_path):
        path = tmp_path / "mixer"
        path.write_bytes(b"")
        with NetBSDMixerDevice.open(str(path)) as device:
            assert list(device.enumerate()) == []
            with pytest.raises(MixerDeviceError) as excinfo:
                device.read_control(3, ControlType.VALUE, 2)
            assert excinfo.value.operation == "AUDIO_MIXER_READ"
            with pytest.raises(MixerDeviceError):
                device.write_control(3, ControlType.ENUM, 1)

    def test_closed_device_rejects_requests(self, tmp_path):
        path = tmp_path / "mixer"
        path.write_bytes(b"")
        device = NetBSDMixerDevice.open(str(path))
        device.close()
        device.close()
        with pytest.raises(MixerDeviceError):
            device.read_control(0, ControlType.ENUM)


def test_base_device_is_abstract():
    device = MixerDevice()
    with pytest.raises(NotImplementedError):
        device.enumerate()
