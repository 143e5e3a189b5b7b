# tests/conftest.py
import pytest

from htmlint.controllers.lint_controller import LintController
from htmlint.model import FrameworkConfig, LinterConfig


@pytest.fixture
def make_controller():
    """Factory fixture that builds a LintController for a given framework setup."""
    def _make(htmx: bool = False, htmx_version: str = "2", **config) -> LintController:
        frameworks = FrameworkConfig(htmx=htmx, htmx_version=htmx_version)
        return LintController(LinterConfig(frameworks=frameworks, **config))
    return _make


@pytest.fixture
def lint(make_controller):
    """Lints a snippet through the fragment entry point and returns the results."""
    def _lint(html: str, htmx: bool = False, htmx_version: str = "2", filename: str = "test.html", **config):
        controller = make_controller(htmx=htmx, htmx_version=htmx_version, **config)
        return controller.lint_content(filename, html)
    return _lint
