"""Entity to html export pipeline."""

from .beautify import BeautifyHtmlTask, HtmlFormatter
from .filename import FilenameResolver, country_for, normalize_path
from .models import ExportResult, ExportSetting, TaskParameters
from .synthesizer import (
    RenderKind,
    RenderPlan,
    TemplateSynthesizer,
    default_macro_name,
    template_literal,
)
from .task import ExportHtmlTask
from .writer import WriteFilesTask

__all__ = [
    "ExportHtmlTask",
    "ExportSetting",
    "ExportResult",
    "TaskParameters",
    "FilenameResolver",
    "country_for",
    "normalize_path",
    "RenderKind",
    "RenderPlan",
    "TemplateSynthesizer",
    "default_macro_name",
    "template_literal",
    "HtmlFormatter",
    "BeautifyHtmlTask",
    "WriteFilesTask",
]
