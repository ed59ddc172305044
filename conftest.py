"""Shared fixtures: a small NetBSD-like mixer layout on a virtual device."""
import sys
from pathlib import Path

import pytest

# Add project directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from mixer.catalog import build_catalog
from mixer.device import ControlType, Descriptor
from mixer.virtual_device import VirtualMixerDevice


def sample_descriptors():
    """inputs/outputs/record classes with a mix of control types."""
    return [
        Descriptor(0, ControlType.CLASS, "inputs", mixer_class=0),
        Descriptor(1, ControlType.CLASS, "outputs", mixer_class=1),
        Descriptor(2, ControlType.CLASS, "record", mixer_class=2),
        Descriptor(3, ControlType.VALUE, "dac", mixer_class=0, next=4, num_channels=2, delta=0),
        Descriptor(4, ControlType.ENUM, "mute", mixer_class=0, prev=3,
                   members=[("off", 0), ("on", 1)]),
        Descriptor(5, ControlType.VALUE, "master", mixer_class=1, num_channels=2, delta=4),
        Descriptor(6, ControlType.ENUM, "source", mixer_class=2,
                   members=[("mic", 0), ("cd", 1), ("line", 2)]),
        Descriptor(7, ControlType.SET, "monitor", mixer_class=2,
                   members=[("mic", 1), ("cd", 2), ("line", 4)]),
        Descriptor(8, ControlType.VALUE, "bogus", mixer_class=9, num_channels=1),
    ]


@pytest.fixture
def descriptors():
    return sample_descriptors()


@pytest.fixture
def device(descriptors):
    return VirtualMixerDevice(descriptors, {3: [200, 200], 4: 1, 5: [128, 64], 6: 2, 7: 4})


@pytest.fixture
def catalog(device):
    return build_catalog(device.enumerate())
