import io
from concurrent.futures import ThreadPoolExecutor

from rich.console import Console

from repokit.library import (
    TemplateProject,
    TemplateProjectConfiguration,
    TemplateProjectUI,
    WelcomeView,
)


def test_greet():
    assert TemplateProject().greet() == "Hello from Template Project!"


def test_version():
    assert TemplateProject.VERSION == "1.0.0"
    assert TemplateProjectUI.VERSION == "1.0.0"


def test_concurrent_greet():
    project = TemplateProject.shared
    with ThreadPoolExecutor(max_workers=10) as pool:
        greetings = list(pool.map(lambda _: project.greet(), range(10)))
    assert greetings == ["Hello from Template Project!"] * 10


def test_configuration_defaults():
    configuration = TemplateProjectConfiguration()
    assert configuration.is_debug_mode is False
    assert configuration.application_name == "Template App"


def test_configure_debug_mode_does_not_change_greeting():
    TemplateProject.configure(
        TemplateProjectConfiguration(is_debug_mode=True, application_name="Weather")
    )
    assert TemplateProject.shared.greet() == "Hello from Template Project!"


def test_welcome_view_renders():
    console = Console(file=io.StringIO(), width=80)
    console.print(WelcomeView())
    text = console.file.getvalue()
    assert "Welcome to Template Project" in text
    assert "Hello from Template Project!" in text
