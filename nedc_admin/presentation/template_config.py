"""
Jinja2 template configuration with filters.
One shared templates object for every route.
"""
from pathlib import Path

from fastapi.templating import Jinja2Templates

from .template_filters import TEMPLATE_FILTERS

TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_templates() -> Jinja2Templates:
    """
    Creates the Jinja2Templates object with filters registered.

    Returns:
        Configured templates object
    """
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    # Register every filter
    for filter_name, filter_func in TEMPLATE_FILTERS.items():
        templates.env.filters[filter_name] = filter_func

    return templates

# Global templates object shared by all routes
templates = create_templates()
