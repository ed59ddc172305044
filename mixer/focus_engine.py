"""Navigation state machine for the mixer UI.

The engine owns the focus state and the viewport. Each input is turned
into a list of effects that the rendering layer applies in order; the
engine itself never touches widgets.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from mixer.catalog import Catalog, Control, MixerClass
from mixer.device import ControlType
from mixer.value_sync import ValueSync, clamp_level
from mixer.viewport import ViewportWindow


class Key(Enum):
    """Logical keys, after mapping arrows, vi aliases and so on."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    ESCAPE = "escape"
    UNLOCK = "unlock"
    MUTE = "mute"


class Level(Enum):
    CLASS = "class"
    CONTROL = "control"


@dataclass
class FocusState:
    level: Level = Level.CLASS
    class_index: int = 0
    control_index: int = 0


# ── Effects ──────────────────────────────────────────────────

@dataclass(frozen=True)
class DestroyWidgets:
    """Drop every widget built for a class."""
    class_index: int


@dataclass(frozen=True)
class BuildWidgets:
    """Build widgets for every control of a class and show ``placements``."""
    class_index: int
    placements: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class Reposition:
    """The viewport scrolled; only ``placements`` are visible now."""
    placements: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class SelectionChanged:
    """The class selector now highlights ``class_index``."""
    class_index: int


@dataclass(frozen=True)
class SetFocus:
    """Focus a control's widget, or the class selector when ``control_index`` is None."""
    control_index: Optional[int] = None
    channel: int = 0


@dataclass(frozen=True)
class Redraw:
    """A control's value or lock state changed."""
    control_index: int


@dataclass(frozen=True)
class Notify:
    """A recoverable device error to show to the operator."""
    message: str


@dataclass(frozen=True)
class Quit:
    pass


class FocusEngine:
    """Moves focus across classes, controls and channels.

    Args:
        catalog: The mixer's classes and controls.
        sync: Device reads and writes.
        row_budget: Rows available for control widgets.
    """

    def __init__(self, catalog: Catalog, sync: ValueSync, row_budget: int = 0):
        self.catalog = catalog
        self.sync = sync
        self.viewport = ViewportWindow(row_budget=row_budget)
        self.state = FocusState()
        self.running = True

    # ── Accessors ──────────────────────────────────────────────

    @property
    def current_class(self) -> Optional[MixerClass]:
        if 0 <= self.state.class_index < len(self.catalog.classes):
            return self.catalog.classes[self.state.class_index]
        return None

    @property
    def current_control(self) -> Optional[Control]:
        mixer_class = self.current_class
        if self.state.level != Level.CONTROL or mixer_class is None:
            return None
        if 0 <= self.state.control_index < len(mixer_class.controls):
            return mixer_class.controls[self.state.control_index]
        return None

    # ── Entry points ───────────────────────────────────────────

    def start(self) -> list:
        """Build the first class and focus its first control."""
        effects: list = []
        if self.current_class is not None:
            effects.append(SelectionChanged(self.state.class_index))
        effects += self._build_class()
        effects += self._focus_control(0)
        return effects

    def handle(self, key: Key) -> list:
        """Apply one logical key press and return the resulting effects."""
        if not self.running:
            return []
        if self.state.level == Level.CLASS:
            return self._handle_class_key(key)

        control = self.current_control
        if control is None:
            return self._enter_class_level()
        if control.is_discrete:
            return self._handle_discrete_key(control, key)
        return self._handle_value_key(control, key)

    def jump_to_class(self, class_index: int) -> list:
        """Shortcut: switch to a class and focus its first control."""
        if not self.running or not 0 <= class_index < len(self.catalog.classes):
            return []
        effects = self._switch_class(class_index)
        effects += self._focus_control(0)
        return effects

    def resize(self, row_budget: int) -> list:
        """Rebuild the current class for a new row budget, keeping focus."""
        self.viewport.set_row_budget(row_budget)
        if self.current_class is None:
            return []
        effects: list = [DestroyWidgets(self.state.class_index)]
        if self.state.level == Level.CONTROL:
            self.viewport.scroll_to(self.state.control_index)
        effects += self._build_class(reset=False)
        effects.append(self._focus_effect())
        return effects

    # ── Class level ────────────────────────────────────────────

    def _handle_class_key(self, key: Key) -> list:
        count = len(self.catalog.classes)
        if key == Key.ESCAPE:
            self.running = False
            return [Quit()]
        if count == 0:
            return []
        if key == Key.LEFT:
            return self._switch_class((self.state.class_index - 1) % count)
        if key == Key.RIGHT:
            return self._switch_class((self.state.class_index + 1) % count)
        if key in (Key.DOWN, Key.ENTER):
            return self._focus_control(0)
        return []

    def _switch_class(self, class_index: int) -> list:
        effects: list = []
        if self.current_class is not None:
            effects.append(DestroyWidgets(self.state.class_index))
        self.state.class_index = class_index
        self.state.control_index = 0
        effects.append(SelectionChanged(class_index))
        effects += self._build_class()
        if self.state.level == Level.CLASS:
            effects.append(SetFocus(None))
        return effects

    def _build_class(self, reset: bool = True) -> list:
        mixer_class = self.current_class
        if mixer_class is None:
            return []
        heights = [control.height for control in mixer_class.controls]
        if reset:
            self.viewport.reset(heights)
        else:
            self.viewport.heights = heights

        effects: list = []
        for control in mixer_class.controls:
            effects += self._sync_from_device(control)
        effects.insert(0, BuildWidgets(self.state.class_index,
                                       tuple(self.viewport.placements())))
        return effects

    def _enter_class_level(self) -> list:
        self.state.level = Level.CLASS
        return [SetFocus(None)]

    # ── Control level ──────────────────────────────────────────

    def _focus_control(self, index: int) -> list:
        """Focus control ``index`` of the current class.

        An index past either end of the class returns to the class
        selector.
        """
        mixer_class = self.current_class
        if mixer_class is None or not 0 <= index < len(mixer_class.controls):
            return self._enter_class_level()

        self.state.level = Level.CONTROL
        self.state.control_index = index
        control = mixer_class.controls[index]
        control.current_channel = min(control.current_channel,
                                      max(control.num_channels - 1, 0))

        effects: list = []
        if self.viewport.scroll_to(index):
            effects.append(Reposition(tuple(self.viewport.placements())))
        effects += self._sync_from_device(control)
        effects.append(Redraw(index))
        effects.append(self._focus_effect())
        return effects

    def _focus_effect(self) -> SetFocus:
        control = self.current_control
        if control is None:
            return SetFocus(None)
        return SetFocus(self.state.control_index, control.current_channel)

    def _sync_from_device(self, control: Control) -> list:
        if control.type == ControlType.VALUE:
            self.sync.get_levels(control)
        else:
            self.sync.get_discrete_selection(control)
        return self._device_errors()

    def _device_errors(self) -> list:
        if self.sync.last_error:
            return [Notify(self.sync.last_error)]
        return []

    def _handle_discrete_key(self, control: Control, key: Key) -> list:
        index = self.state.control_index
        if key == Key.ESCAPE:
            return self._enter_class_level()
        if key == Key.UP:
            return self._focus_control(index - 1)
        if key == Key.DOWN:
            return self._focus_control(index + 1)
        if key == Key.ENTER:
            effects: list = []
            if control.selected is not None:
                self.sync.set_discrete(control, control.selected)
                effects += self._device_errors()
            return effects + self._focus_control(index + 1)
        if key in (Key.LEFT, Key.RIGHT) and control.members:
            count = len(control.members)
            step = -1 if key == Key.LEFT else 1
            if control.selected is None:
                member = 0 if step > 0 else count - 1
            else:
                member = (control.selected + step) % count
            self.sync.set_discrete(control, member)
            return self._device_errors() + [Redraw(index)]
        return []

    def _handle_value_key(self, control: Control, key: Key) -> list:
        index = self.state.control_index
        if key == Key.ESCAPE:
            return self._enter_class_level()
        if key == Key.UP:
            if control.current_channel > 0:
                control.current_channel -= 1
                return [self._focus_effect()]
            control.current_channel = 0
            return self._focus_control(index - 1)
        if key in (Key.DOWN, Key.ENTER):
            if control.current_channel < control.num_channels - 1:
                control.current_channel += 1
                return [self._focus_effect()]
            control.current_channel = 0
            return self._focus_control(index + 1)
        if key in (Key.LEFT, Key.RIGHT):
            step = -control.delta if key == Key.LEFT else control.delta
            channel = control.current_channel
            level = clamp_level(control.levels[channel] + step)
            if self.sync.set_level(control, channel, level) is None:
                return self._device_errors()
            return [Redraw(index)]
        if key == Key.UNLOCK:
            control.channels_unlocked = not control.channels_unlocked
            return [Redraw(index)]
        # Key.MUTE is bound but has no behaviour yet
        return []
