"""Jinja2 templates shared by the browser routes and the HTML error pages."""

from fastapi.templating import Jinja2Templates

from crudflow.config import get_settings

templates = Jinja2Templates(directory=get_settings().templates_dir)
