"""Widgets for a single mixer control: member boxes and level sliders."""
from rich.text import Text
from textual.widgets import Static

from mixer.catalog import MAX_LEVEL, Control

CONTROL_CSS = """
    height: 3;
    width: 100%;
    border: round #666666;
    border-title-color: #FFFF00;
    padding: 0 1;
"""


class MemberBox(Static):
    """Enum or set control: one row of members, the device's choice highlighted."""

    DEFAULT_CSS = f"""
    MemberBox {{{CONTROL_CSS}}}

    MemberBox.focused {{
        border: round #FFFF00;
    }}
    """

    def __init__(self, control: Control, **kwargs):
        super().__init__(**kwargs)
        self.control = control
        self.border_title = control.name

    def render(self) -> Text:
        """Render the members, reversing the selected one."""
        text = Text()
        for i, label in enumerate(self.control.member_labels):
            if i:
                text.append("  ")
            style = "bold reverse #FFFF00" if i == self.control.selected else "#FFFF00"
            text.append(label, style=style)
        return text


class LevelSlider(Static):
    """One channel of a value control, drawn as a horizontal bar."""

    DEFAULT_CSS = f"""
    LevelSlider {{{CONTROL_CSS}}}

    LevelSlider.focused {{
        border: round #00FF00;
    }}
    """

    def __init__(self, control: Control, channel: int, **kwargs):
        super().__init__(**kwargs)
        self.control = control
        self.channel = channel
        self.border_title = f"{control.name} (channel {channel})"

    @property
    def level(self) -> int:
        if self.channel < len(self.control.levels):
            return self.control.levels[self.channel]
        return 0

    def render(self) -> Text:
        """Render the bar, the numeric level and the lock marker."""
        level = self.level
        suffix = f" {level:3d}"
        if self.control.num_channels > 1:
            suffix += " unlocked" if self.control.channels_unlocked else " locked"
        width = max(self.content_size.width - len(suffix), 1)
        filled = level * width // MAX_LEVEL
        text = Text()
        text.append("#" * filled, style="bold #00FF00")
        text.append(" " * (width - filled))
        text.append(suffix, style="#888888")
        return text
