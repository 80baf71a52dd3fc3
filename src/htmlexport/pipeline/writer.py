"""Writes exported files below a destination directory."""

import logging
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Union

from ..model.files import OutputFile

logger = logging.getLogger(__name__)


class WriteFilesTask:
    """Persists streamed files and passes them on."""

    def __init__(self, write_path: Union[str, Path]) -> None:
        self.write_path = Path(write_path)

    def target_for(self, file: OutputFile) -> Path:
        return self.write_path / file.path

    async def stream(self, files: AsyncIterable[OutputFile]) -> AsyncIterator[OutputFile]:
        async for file in files:
            target = self.target_for(file)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.contents)
            logger.info(f"Wrote {target}")
            yield file
