"""Class selector row shown above the controls."""
from typing import List

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Label, Static


class ClassButton(Static):
    """A single class name in the selector row."""

    DEFAULT_CSS = """
    ClassButton {
        width: auto;
        height: 1;
        padding: 0 1;
        color: #CCCCCC;
    }

    ClassButton.selected {
        color: #FFFFFF;
        text-style: bold;
    }
    """

    def __init__(self, index: int, name: str):
        super().__init__(f"F{index + 1} {name}" if index < 12 else name)
        self.index = index

    def set_selected(self, selected: bool):
        """Mark this button as the current class."""
        if selected:
            self.add_class("selected")
        else:
            self.remove_class("selected")


class ClassBar(Horizontal):
    """Row of class buttons; highlighted while class navigation is active."""

    DEFAULT_CSS = """
    ClassBar {
        width: 100%;
        height: 1;
    }

    ClassBar > #classes-title {
        width: auto;
        text-style: bold;
        color: $accent;
        padding-right: 1;
    }

    ClassBar.active > ClassButton.selected {
        background: #0000AA;
    }
    """

    def __init__(self, class_names: List[str], **kwargs):
        super().__init__(**kwargs)
        self.class_names = list(class_names)
        self.buttons = [ClassButton(i, name) for i, name in enumerate(self.class_names)]

    def compose(self) -> ComposeResult:
        yield Label("Classes", id="classes-title")
        yield from self.buttons

    def select(self, index: int):
        """Highlight the class at ``index``."""
        for button in self.buttons:
            button.set_selected(button.index == index)

    def set_active(self, active: bool):
        """Show whether left/right currently move between classes."""
        if active:
            self.add_class("active")
        else:
            self.remove_class("active")
