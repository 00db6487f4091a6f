from .project import TemplateProject, TemplateProjectConfiguration
from .ui import TemplateProjectUI, WelcomeView

__all__ = [
    "TemplateProject",
    "TemplateProjectConfiguration",
    "TemplateProjectUI",
    "WelcomeView",
]
