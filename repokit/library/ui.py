from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from repokit.library.project import TemplateProject

WELCOME_TITLE = "Welcome to Template Project"


class TemplateProjectUI:
    VERSION = "1.0.0"


class WelcomeView:
    """Terminal rendition of the template's welcome screen."""

    def __init__(self, project: TemplateProject | None = None):
        self.project = project or TemplateProject()

    def render(self) -> Panel:
        body = Group(
            Align.center(Text(WELCOME_TITLE, style="bold")),
            Text(""),
            Align.center(Text(self.project.greet(), style="dim")),
        )
        return Panel(body, padding=(1, 4), expand=False)

    def __rich__(self) -> Panel:
        return self.render()
