import io
from unittest.mock import patch

from rich.console import Console

from repokit.core.console import StatusConsole


def test_confirm_assume_yes():
    console = StatusConsole(Console(file=io.StringIO()), assume_yes=True)
    with patch("repokit.core.console.Confirm.ask") as mock_ask:
        assert console.confirm("Proceed?", default=False) is True
    mock_ask.assert_not_called()


def test_confirm_asks():
    console = StatusConsole(Console(file=io.StringIO()))
    with patch("repokit.core.console.Confirm.ask", return_value=False) as mock_ask:
        assert console.confirm("Continue anyway?") is False
    mock_ask.assert_called_once_with("Continue anyway?", default=False, console=console.console)


def test_status_lines():
    buffer = io.StringIO()
    console = StatusConsole(Console(file=buffer, width=120))
    console.success("Created .env")
    console.error("Missing: APPLE_ID")
    console.flag("Dry run", False)

    text = buffer.getvalue()
    assert "✅ Created .env" in text
    assert "❌ Missing: APPLE_ID" in text
    assert "Dry run: ❌" in text
