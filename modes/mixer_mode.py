"""Mixer mode: class selector above a scrolling column of control widgets."""
from typing import Dict, List

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Label

from components.class_bar import ClassBar
from components.control_widgets import LevelSlider, MemberBox
from components.header_widget import HeaderWidget
from mixer.device import ControlType
from mixer.focus_engine import (
    BuildWidgets,
    DestroyWidgets,
    FocusEngine,
    Key,
    Notify,
    Quit,
    Redraw,
    Reposition,
    SelectionChanged,
    SetFocus,
)

TITLE = "NetBSD Audio Mixer"


class ControlsArea(Vertical):
    """Fixed-height area holding the visible control widgets."""

    DEFAULT_CSS = """
    ControlsArea {
        width: 100%;
        height: 1fr;
        overflow: hidden hidden;
    }
    """

    class Resized(Message):
        """Message: the rows available for controls changed."""

        def __init__(self, height: int):
            super().__init__()
            self.height = height

    def on_resize(self, event: events.Resize) -> None:
        self.post_message(self.Resized(event.size.height))


class MixerMode(Vertical):
    """Widget that feeds key presses to the FocusEngine and renders its effects."""

    DEFAULT_CSS = """
    MixerMode {
        width: 100%;
        height: 100%;
        padding: 0 1;
    }

    #controls-title {
        width: 100%;
        text-style: bold;
        color: $accent;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("up,k", "press('up')", "Up", show=False),
        Binding("down,j", "press('down')", "Down", show=False),
        Binding("left,h", "press('left')", "Left", show=False),
        Binding("right,l", "press('right')", "Right", show=False),
        Binding("enter", "press('enter')", "Select", show=False),
        Binding("escape", "press('escape')", "Back", show=False),
        Binding("u", "press('unlock')", "Lock/Unlock", show=False),
        Binding("m", "press('mute')", "Mute", show=False),
    ] + [
        Binding(f"f{n},{n}" if n < 10 else f"f{n}", f"select_class({n - 1})", show=False)
        for n in range(1, 13)
    ]

    can_focus = True

    def __init__(self, engine: FocusEngine, device_path: str = "", **kwargs):
        super().__init__(**kwargs)
        self.engine = engine
        self.device_path = device_path
        self.control_widgets: Dict[int, List] = {}
        self._started = False

    def compose(self) -> ComposeResult:
        """Create the mixer layout."""
        yield HeaderWidget(title=TITLE, subtitle=self.device_path)
        yield ClassBar(self.engine.catalog.class_names, id="class-bar")
        yield Label("Controls", id="controls-title")
        yield ControlsArea(id="controls")

    def on_mount(self) -> None:
        self.focus()

    def on_controls_area_resized(self, message: ControlsArea.Resized) -> None:
        """Start the engine on the first layout, rebuild on later resizes."""
        if not self._started:
            self._started = True
            self.engine.viewport.set_row_budget(message.height)
            self.apply_effects(self.engine.start())
        else:
            self.apply_effects(self.engine.resize(message.height))

    def action_press(self, key: str) -> None:
        if self._started:
            self.apply_effects(self.engine.handle(Key(key)))

    def action_select_class(self, index: int) -> None:
        if self._started:
            self.apply_effects(self.engine.jump_to_class(index))

    # ── Effects ────────────────────────────────────────────────

    def apply_effects(self, effects: list):
        """Apply FocusEngine effects in order."""
        for effect in effects:
            if isinstance(effect, DestroyWidgets):
                self._destroy_widgets()
            elif isinstance(effect, BuildWidgets):
                self._build_widgets(effect)
            elif isinstance(effect, Reposition):
                self._show_placements(effect.placements)
            elif isinstance(effect, SelectionChanged):
                self.query_one(ClassBar).select(effect.class_index)
            elif isinstance(effect, SetFocus):
                self._set_focus(effect)
            elif isinstance(effect, Redraw):
                for widget in self.control_widgets.get(effect.control_index, []):
                    widget.refresh()
            elif isinstance(effect, Notify):
                self.app.notify(effect.message, severity="warning", timeout=3)
            elif isinstance(effect, Quit):
                self.app.exit()

    def _destroy_widgets(self):
        self.query_one(ControlsArea).remove_children()
        self.control_widgets = {}

    def _build_widgets(self, effect: BuildWidgets):
        mixer_class = self.engine.catalog.classes[effect.class_index]
        widgets = []
        for index, control in enumerate(mixer_class.controls):
            if control.type == ControlType.VALUE:
                row = [LevelSlider(control, chan) for chan in range(control.num_channels)]
            else:
                row = [MemberBox(control)]
            self.control_widgets[index] = row
            widgets.extend(row)
        self._show_placements(effect.placements)
        self.query_one(ControlsArea).mount_all(widgets)

    def _show_placements(self, placements):
        """Display only the controls in ``placements``; the layout stacks them in order."""
        visible = {index for index, _ in placements}
        for index, row in self.control_widgets.items():
            for widget in row:
                widget.display = index in visible

    def _set_focus(self, effect: SetFocus):
        for row in self.control_widgets.values():
            for widget in row:
                widget.remove_class("focused")
        self.query_one(ClassBar).set_active(effect.control_index is None)
        if effect.control_index is None:
            return
        row = self.control_widgets.get(effect.control_index, [])
        if row:
            row[min(effect.channel, len(row) - 1)].add_class("focused")
