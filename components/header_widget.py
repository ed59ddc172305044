"""Title banner with the mixer device path underneath."""
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static


class HeaderWidget(Vertical):
    """Boxed title plus a dim status line."""

    DEFAULT_CSS = """
    HeaderWidget {
        width: 100%;
        height: auto;
        align: right top;
    }

    .header-boxed {
        width: auto;
        height: auto;
        text-align: center;
        color: $accent;
    }

    #header-status {
        width: auto;
        text-align: right;
    }
    """

    def __init__(self, title: str, subtitle: str = "", **kwargs):
        super().__init__(**kwargs)
        self.title_text = title
        self.subtitle_text = subtitle

    def compose(self) -> ComposeResult:
        yield Static(self._create_boxed_title(self.title_text), classes="header-boxed")
        if self.subtitle_text:
            yield Static(f"[italic #666666]{self.subtitle_text}[/]", id="header-status")

    def _create_boxed_title(self, title: str) -> str:
        """Create a boxed title just wide enough for the text."""
        title_padded = f" {title} "
        inner_width = len(title_padded) + 2

        top = f"╔{'═' * inner_width}╗"
        mid = f"║ {title_padded} ║"
        bottom = f"╚{'═' * inner_width}╝"

        return f"{top}\n{mid}\n{bottom}"

