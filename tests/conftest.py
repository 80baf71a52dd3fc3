"""Shared pytest fixtures and configuration."""

import shutil
from pathlib import Path

from pytest import fixture

from htmlexport.errors import ErrorReporter
from htmlexport.project import Project

FIXTURES = Path(__file__).parent / "fixtures"


@fixture
def project_dir(tmp_path) -> Path:
    """A private copy of the fixture project."""
    target = tmp_path / "project"
    shutil.copytree(FIXTURES / "project", target)
    return target


@fixture
def config_file(project_dir) -> Path:
    return project_dir / "htmlexport.yaml"


@fixture
def project(config_file) -> Project:
    """The fixture project with sites `base` and `extended`."""
    return Project.load(config_file)


@fixture
def reporter() -> ErrorReporter:
    return ErrorReporter()


@fixture
def task(project, reporter):
    """An export task over the fixture project."""
    return project.export_task(error_reporter=reporter)


@fixture
def write_template(project_dir):
    """Write an entity template (and optional entity.yaml) into the project."""

    def _write(path: str, source: str, properties: str = None) -> Path:
        directory = project_dir / "sites" / Path(path).parent
        directory.mkdir(parents=True, exist_ok=True)
        template = project_dir / "sites" / path
        template.write_text(source, encoding="utf-8")
        if properties is not None:
            (directory / "entity.yaml").write_text(properties, encoding="utf-8")
        return template

    return _write
