"""systop - Main Textual application."""

import sys
from enum import Enum

from textual.app import App, ComposeResult
from textual.widgets import Static

from systop.models import Snapshot
from systop.monitor import MetricsProvider, PsutilProvider, SamplerError, sample
from systop.render import Renderer


class MonitorState(Enum):
    """Lifecycle states of the monitor."""

    INIT = "init"
    RUNNING = "running"
    SHUTDOWN = "shutdown"


class MetricsView(Static):
    """Widget showing the rendered frame."""

    DEFAULT_CSS = """
    MetricsView {
        width: 1fr;
        height: 1fr;
        overflow: hidden;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize MetricsView."""
        super().__init__(*args, **kwargs)
        self.renderer = Renderer()

    def show(self, snapshot: Snapshot) -> None:
        """Redraw from a snapshot and push the frame to the screen."""
        self.renderer.draw(snapshot)
        self.update(self.renderer.canvas.to_text())


class SystopApp(App):
    """Main systop application."""

    TITLE = "systop"
    SUB_TITLE = "CPU and Memory Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        provider: MetricsProvider | None = None,
        refresh_interval: float = 1.0,
    ) -> None:
        """
        Initialize the SystopApp.

        Args:
            provider: Metrics source. Defaults to a psutil-backed provider.
            refresh_interval: Seconds between samples. Default 1.0s.
        """
        super().__init__()
        self._provider = provider if provider is not None else PsutilProvider()
        self._refresh_interval = max(0.1, refresh_interval)  # Minimum 0.1 seconds
        self._state = MonitorState.INIT

    @property
    def state(self) -> MonitorState:
        """Get the current lifecycle state."""
        return self._state

    @property
    def refresh_interval(self) -> float:
        """Get the refresh interval."""
        return self._refresh_interval

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield MetricsView("Sampling...", id="metrics")

    def on_mount(self) -> None:
        """Start sampling when the app is mounted."""
        self._state = MonitorState.RUNNING
        self.log.info(f"Sampling every {self._refresh_interval}s")
        # First sample waits one interval so the CPU reading spans a real period
        self.set_interval(self._refresh_interval, self.refresh_snapshot)

    def refresh_snapshot(self) -> None:
        """Sample the provider and redraw. Sampling failures are fatal."""
        if self._state is not MonitorState.RUNNING:
            return

        try:
            snapshot = sample(self._provider)
        except SamplerError as error:
            self.log.error(f"Sampling failed: {error}")
            self._request_shutdown(return_code=1, message=f"systop: {error}")
            return

        self.query_one("#metrics", MetricsView).show(snapshot)

    def _request_shutdown(self, return_code: int = 0, message: str | None = None) -> None:
        """Leave the running state; Textual restores the terminal on exit."""
        self._state = MonitorState.SHUTDOWN
        self.exit(return_code=return_code, message=message)

    def action_quit(self) -> None:
        """Handle quit action."""
        self._request_shutdown()


def main() -> None:
    """Entry point for systop application."""
    app = SystopApp()
    app.run()
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
