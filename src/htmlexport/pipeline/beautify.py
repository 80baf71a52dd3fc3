"""Html beautification of exported files."""

import logging
from typing import AsyncIterable, AsyncIterator, Optional

from bs4 import BeautifulSoup
from bs4.formatter import HTMLFormatter

from ..errors import ErrorReporter
from ..model.files import OutputFile

logger = logging.getLogger(__name__)


class HtmlFormatter:
    """Pretty-prints html markup."""

    def __init__(self, indent: int = 4, parser: str = "html.parser") -> None:
        self.indent = indent
        self.parser = parser

    def format(self, content: str) -> str:
        if not content or not content.strip():
            return ""
        soup = BeautifulSoup(content, self.parser)
        return soup.prettify(formatter=HTMLFormatter(indent=self.indent)).rstrip("\n")


class BeautifyHtmlTask:
    """Formats every streamed file; files failing to format are dropped."""

    def __init__(
        self,
        formatter: Optional[HtmlFormatter] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ) -> None:
        self.formatter = formatter or HtmlFormatter()
        self.error_reporter = error_reporter or ErrorReporter()

    async def stream(self, files: AsyncIterable[OutputFile]) -> AsyncIterator[OutputFile]:
        async for file in files:
            logger.debug(f"Beautifying <{file.path}>")
            try:
                formatted = self.formatter.format(file.text)
            except Exception as e:
                self.error_reporter.report(e, entity=file.path)
                continue
            yield OutputFile.from_text(file.path, formatted)
