#!/usr/bin/env python3
"""Audio Mixer TUI Application - Main Entry Point."""
import argparse
import logging
import sys
from typing import List, Optional

from textual.app import App
from textual.containers import Container
from textual.logging import TextualHandler
from textual.screen import Screen
from textual.widgets import Static

from config_manager import ConfigManager
from mixer.catalog import Catalog, build_catalog
from mixer.device import DEFAULT_MIXER_DEVICE, MixerDevice, NetBSDMixerDevice
from mixer.focus_engine import FocusEngine
from mixer.value_sync import ValueSync
from modes.mixer_mode import TITLE, MixerMode


class MixerHelpBar(Static):
    """Help bar displaying the mixer keybinds on two lines."""

    def render(self) -> str:
        """Render the help bar with two lines of keybinds."""
        line1 = "←→/hl: Class or Value | ↑↓/jk: Control/Channel | ENTER: Next | ESC: Back/Quit"
        line2 = "U: Lock/Unlock Channels | F1-F12 / 1-9: Jump to Class"
        return f"{line1}\n{line2}"


class MainScreen(Screen):
    """Main screen: mixer mode above the help bar."""

    CSS = """
    MainScreen {
        layout: vertical;
    }

    #content-area {
        height: 1fr;
        width: 100%;
    }

    #mixer-help-bar {
        width: 100%;
        height: auto;
        text-align: center;
        color: $text-muted;
        padding: 0;
        margin: 0;
        border-top: solid $accent;
    }
    """

    def __init__(self, app_context: dict):
        super().__init__()
        self.app_context = app_context

    def compose(self):
        """Compose the main screen layout."""
        with Container(id="content-area"):
            yield MixerMode(self.app_context["engine"], self.app_context["device_path"])
        yield MixerHelpBar(id="mixer-help-bar")


class MixerApp(App):
    """Audio Mixer TUI Application."""

    def __init__(self, device: MixerDevice, catalog: Catalog, device_path: str = DEFAULT_MIXER_DEVICE):
        super().__init__()
        self.title = TITLE
        self.device = device
        self.catalog = catalog
        self.value_sync = ValueSync(device)
        self.engine = FocusEngine(catalog, self.value_sync)

        self.app_context = {
            "engine": self.engine,
            "device_path": device_path,
        }

    def on_mount(self):
        """Called when app mounts."""
        self.push_screen(MainScreen(self.app_context))


class UsageParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on bad usage."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = UsageParser(
        prog="aiomixer",
        usage="aiomixer [-d device]",
        description="Interactive terminal mixer for audio(4) devices.",
    )
    parser.add_argument(
        "-d",
        dest="device",
        metavar="device",
        help=f"Mixer device (default: {DEFAULT_MIXER_DEVICE})",
    )
    return parser


def resolve_device_path(args: argparse.Namespace, config_manager: ConfigManager) -> str:
    """Pick the mixer path: command line, then config, then the platform default."""
    return args.device or config_manager.get_mixer_device() or DEFAULT_MIXER_DEVICE


def configure_logging() -> logging.Handler:
    """Send warnings to the Textual log while the app runs, to stderr otherwise."""
    handler = TextualHandler()
    handler.setFormatter(logging.Formatter("aiomixer: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    return handler


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)
    configure_logging()

    device_path = resolve_device_path(args, ConfigManager())
    try:
        device = NetBSDMixerDevice.open(device_path)
    except OSError as e:
        print(f"open(mixer_device): {e.strerror or e}", file=sys.stderr)
        return 1

    with device:
        catalog = build_catalog(device.enumerate())
        app = MixerApp(device, catalog, device_path)
        app.run()
        return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
