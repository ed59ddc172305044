"""Reads and writes control values against the mixer device."""
import logging
from typing import List, Optional

from mixer.catalog import MAX_LEVEL, MIN_LEVEL, Control
from mixer.device import ControlType, MixerDevice, MixerDeviceError

logger = logging.getLogger(__name__)


def clamp_level(level: int) -> int:
    """Clamp a level to the device's 0..255 gain range."""
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


class ValueSync:
    """Keeps the runtime fields of controls in step with the device.

    Device failures are logged as warnings and reported through the return
    value; they never raise. Each call resets ``last_error``, which
    then holds the failure message of that call, if any.
    """

    def __init__(self, device: MixerDevice):
        self.device = device
        self.last_error: Optional[str] = None

    def _warn(self, error: MixerDeviceError):
        self.last_error = str(error)
        logger.warning("%s", error)

    def get_discrete_selection(self, control: Control) -> Optional[int]:
        """Return the index of the member matching the device value.

        Returns None when the read fails or no member matches; in both
        cases nothing is highlighted.
        """
        self.last_error = None
        try:
            value = self.device.read_control(control.dev, control.type)
        except MixerDeviceError as e:
            self._warn(e)
            return None

        for i, (_, member_value) in enumerate(control.members):
            if member_value == value:
                control.selected = i
                return i
        control.selected = None
        return None

    def set_discrete(self, control: Control, member_index: int) -> bool:
        """Write a member's ordinal (ENUM) or bitmask (SET) to the device.

        Returns:
            True on success. On failure the control is left untouched.
        """
        self.last_error = None
        _, value = control.members[member_index]
        try:
            self.device.write_control(control.dev, control.type, value)
        except MixerDeviceError as e:
            self._warn(e)
            return False
        control.selected = member_index
        return True

    def get_levels(self, control: Control) -> Optional[List[int]]:
        """Read the per-channel levels of a VALUE control."""
        self.last_error = None
        try:
            levels = self.device.read_control(control.dev, ControlType.VALUE,
                                              control.num_channels)
        except MixerDeviceError as e:
            self._warn(e)
            return None
        levels = [clamp_level(level) for level in levels][:control.num_channels]
        levels += [MIN_LEVEL] * (control.num_channels - len(levels))
        control.levels = levels
        return list(levels)

    def set_level(self, control: Control, channel: int, level: int) -> Optional[List[int]]:
        """Set one channel's level, honouring the control's channel lock.

        With channels locked together every channel gets ``level``. With
        channels unlocked the device is re-read first so that channels
        changed elsewhere keep their current hardware value.

        Returns:
            The levels written, or None if the read or write failed.
        """
        self.last_error = None
        level = clamp_level(level)
        if not control.channels_unlocked:
            levels = [level] * control.num_channels
        else:
            try:
                levels = self.device.read_control(control.dev, ControlType.VALUE,
                                                  control.num_channels)
            except MixerDeviceError as e:
                self._warn(e)
                return None
            levels = list(levels)[:control.num_channels]
            levels += [MIN_LEVEL] * (control.num_channels - len(levels))
            levels[channel] = level

        try:
            self.device.write_control(control.dev, ControlType.VALUE, levels)
        except MixerDeviceError as e:
            self._warn(e)
            return None
        control.levels = list(levels)
        return levels
