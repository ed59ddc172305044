"""Hierarchical class/control model built from the flat device enumeration."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from mixer.device import (
    AUDIO_MIXER_LAST,
    MAX_CHANNELS,
    MAX_MEMBERS,
    ControlType,
    Descriptor,
)

logger = logging.getLogger(__name__)

MAX_CLASSES = 16
MAX_CONTROLS = 64

DEFAULT_DELTA = 8
MIN_LEVEL = 0
MAX_LEVEL = 255


@dataclass
class Control:
    """A single adjustable mixer parameter."""
    name: str
    type: ControlType
    dev: int
    class_id: int
    prev: int = AUDIO_MIXER_LAST
    next: int = AUDIO_MIXER_LAST
    parent: Optional[int] = None
    # (label, ordinal) for ENUM, (label, bitmask) for SET
    members: List[Tuple[str, int]] = field(default_factory=list)
    num_channels: int = 0
    delta: int = DEFAULT_DELTA

    # Runtime-only state
    current_channel: int = 0
    channels_unlocked: bool = False
    levels: List[int] = field(default_factory=list)
    selected: Optional[int] = None

    @property
    def is_discrete(self) -> bool:
        return self.type in (ControlType.ENUM, ControlType.SET)

    @property
    def height(self) -> int:
        """Display rows taken by this control's widgets."""
        if self.type == ControlType.VALUE:
            return 3 * self.num_channels
        return 3

    @property
    def member_labels(self) -> List[str]:
        return [label for label, _ in self.members]


@dataclass
class MixerClass:
    """A top-level grouping of controls, e.g. inputs or outputs."""
    id: int
    name: str
    controls: List[Control] = field(default_factory=list)


class Catalog:
    """All classes of one mixer device, in enumeration order."""

    def __init__(self, classes: Optional[List[MixerClass]] = None):
        self.classes: List[MixerClass] = classes or []
        self._by_dev: Dict[int, Control] = {}
        for mixer_class in self.classes:
            for control in mixer_class.controls:
                self._by_dev[control.dev] = control

    def __len__(self) -> int:
        return len(self.classes)

    @property
    def class_names(self) -> List[str]:
        return [c.name for c in self.classes]

    def get_class(self, class_id: int) -> Optional[MixerClass]:
        """Return the class with the given device id, or None."""
        for mixer_class in self.classes:
            if mixer_class.id == class_id:
                return mixer_class
        return None

    def get_control(self, dev: int) -> Optional[Control]:
        """Return the control with the given device index, or None."""
        return self._by_dev.get(dev)

    def add_control(self, mixer_class: MixerClass, control: Control):
        mixer_class.controls.append(control)
        self._by_dev[control.dev] = control

    def find_root_control(self, dev: int) -> Optional[Control]:
        """Follow prev links from ``dev`` to the control that has none.

        Returns None when a link points at an unknown control or the
        chain loops. The walk is bounded by the number of controls.
        """
        control = self.get_control(dev)
        steps = 0
        while control is not None and control.prev != AUDIO_MIXER_LAST:
            steps += 1
            if steps > len(self._by_dev):
                return None
            control = self.get_control(control.prev)
        return control


def _make_control(desc: Descriptor) -> Control:
    control = Control(
        name=desc.label,
        type=desc.type,
        dev=desc.index,
        class_id=desc.mixer_class,
        prev=desc.prev,
        next=desc.next,
    )
    if desc.type in (ControlType.ENUM, ControlType.SET):
        if len(desc.members) > MAX_MEMBERS:
            logger.debug("control %d: dropping %d members over capacity",
                         desc.index, len(desc.members) - MAX_MEMBERS)
        control.members = list(desc.members[:MAX_MEMBERS])
    else:
        channels = max(1, min(desc.num_channels, MAX_CHANNELS))
        if channels != desc.num_channels:
            logger.debug("control %d: clamping %d channels to %d",
                         desc.index, desc.num_channels, channels)
        control.num_channels = channels
        control.delta = desc.delta if desc.delta else DEFAULT_DELTA
        control.levels = [MIN_LEVEL] * channels
    return control


def build_catalog(descriptors: Iterable[Descriptor]) -> Catalog:
    """Build the class/control hierarchy from a flat descriptor sequence.

    Classes are collected first so that controls can refer to a class
    enumerated after them. Entries that do not fit (unknown class, class
    or control capacity exhausted) are dropped; the build never fails.
    """
    descriptors = list(descriptors)
    catalog = Catalog()

    for desc in descriptors:
        if desc.type != ControlType.CLASS:
            continue
        if len(catalog.classes) >= MAX_CLASSES:
            logger.debug("class %d (%s): class capacity reached", desc.mixer_class, desc.label)
            continue
        if catalog.get_class(desc.mixer_class) is not None:
            logger.debug("class %d (%s): duplicate id", desc.mixer_class, desc.label)
            continue
        catalog.classes.append(MixerClass(id=desc.mixer_class, name=desc.label))

    for desc in descriptors:
        if desc.type == ControlType.CLASS:
            continue
        mixer_class = catalog.get_class(desc.mixer_class)
        if mixer_class is None:
            logger.debug("control %d (%s): no class %d", desc.index, desc.label, desc.mixer_class)
            continue
        if len(mixer_class.controls) >= MAX_CONTROLS:
            logger.debug("control %d (%s): class %s is full", desc.index, desc.label, mixer_class.name)
            continue

        control = _make_control(desc)
        if desc.prev != AUDIO_MIXER_LAST:
            root = catalog.find_root_control(desc.prev)
            if root is not None:
                control.parent = root.dev
                control.name = f"{root.name}.{desc.label}"
        catalog.add_control(mixer_class, control)

    return catalog
