"""Unit tests for cli.output module."""

from rich.console import Console

from src.cli.models import AppConfig
from src.cli.output import OutputHandler
from src.database_sync.models import ProgressEvent, ProgressPhase, SyncResult
from src.vault.models import SyncedCollection


def _handler(verbosity=0):
    console = Console(record=True, width=120, no_color=True, force_terminal=False)
    return OutputHandler(verbosity=verbosity, console=console)


def _text(handler):
    return handler.console.export_text()


class TestOutputHandlerInit:
    """Test cases for OutputHandler initialization."""

    def test_init_defaults(self):
        """Initialize with default verbosity and a console."""
        handler = OutputHandler()

        assert handler.verbosity == 0
        assert handler.console is not None

    def test_no_color(self):
        """no_color disables colors on the console."""
        assert OutputHandler(no_color=True).console.no_color is True


class TestMessages:
    """Test cases for message methods."""

    def test_success_and_error(self):
        """Success and error messages are always shown."""
        handler = _handler()

        handler.success("done")
        handler.error("broke")

        text = _text(handler)
        assert "✓ done" in text
        assert "✗ broke" in text

    def test_info_respects_verbosity(self):
        """info is hidden at verbosity 0 and shown at 1."""
        quiet, chatty = _handler(0), _handler(1)

        quiet.info("hello")
        chatty.info("hello")

        assert "hello" not in _text(quiet)
        assert "hello" in _text(chatty)

    def test_debug_respects_verbosity(self):
        """debug needs verbosity 2."""
        handler = _handler(1)

        handler.debug("details")

        assert "details" not in _text(handler)

    def test_markup_escaped(self):
        """Square brackets in messages are printed literally."""
        handler = _handler()

        handler.success("[[remote-id: abc]]")

        assert "[[remote-id: abc]]" in _text(handler)


class TestSummary:
    """Test cases for print_summary."""

    def test_counts(self):
        """All counters are printed."""
        handler = _handler()
        result = SyncResult("Tasks", "Notion/Tasks", total=5, created=1, updated=2,
                            skipped=1, deleted=1)

        handler.print_summary(result, "refreshed")

        text = _text(handler)
        assert "Tasks refreshed into Notion/Tasks" in text
        assert "Created: 1" in text
        assert "Updated: 2" in text
        assert "Unchanged: 1" in text
        assert "Deleted upstream: 1" in text
        assert "Sync completed successfully" in text

    def test_failures_listed(self):
        """Failures print the count and every error message."""
        handler = _handler()
        result = SyncResult("Tasks", "Notion/Tasks", total=2, created=1, failed=1,
                            errors=("Entry abc: timeout",))

        handler.print_summary(result, "imported")

        text = _text(handler)
        assert "Failed: 1" in text
        assert "Entry abc: timeout" in text
        assert "completed with failures" in text

    def test_in_sync(self):
        """A run that changed nothing says so."""
        handler = _handler()

        handler.print_summary(SyncResult("Tasks", "Notion/Tasks", total=3, skipped=3), "refreshed")

        assert "Already in sync" in _text(handler)


class TestCollections:
    """Test cases for print_collections."""

    def test_table(self):
        """Synced databases are listed with folder and count."""
        handler = _handler()

        handler.print_collections([SyncedCollection("db-1", "Tasks", "Notion/Tasks", 4)])

        text = _text(handler)
        assert "Tasks" in text
        assert "Notion/Tasks" in text
        assert "db-1" in text

    def test_empty(self):
        """An empty vault prints a hint."""
        handler = _handler()

        handler.print_collections([])

        assert "No synced databases" in _text(handler)


class TestConfigDisplay:
    """Test cases for print_config."""

    def test_values_shown(self):
        """Both settings are listed with their values."""
        handler = _handler()

        handler.print_config(AppConfig(vault_path="~/Vault", default_output_folder="DBs"))

        text = _text(handler)
        assert "vault_path" in text
        assert "~/Vault" in text
        assert "DBs" in text


class TestSyncProgress:
    """Test cases for sync_progress."""

    def test_detected_line_printed(self):
        """The detection signal prints a stale-of-total line."""
        handler = _handler()

        with handler.sync_progress("Tasks", "Refreshing") as on_progress:
            on_progress(ProgressEvent(ProgressPhase.QUERYING))
            on_progress(ProgressEvent(ProgressPhase.DIFFING, total=3))
            on_progress(ProgressEvent(ProgressPhase.DETECTED, total=3, stale_count=1))
            on_progress(ProgressEvent(ProgressPhase.IMPORTING, current=1, total=1, title="A"))
            on_progress(ProgressEvent(ProgressPhase.DONE, total=3))

        assert "Detected 1 of 3 entries out of date" in _text(handler)
