"""Html export task: renders every exported entity of a repository."""

import dataclasses
import logging
import time
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Union

from ..config.html import HtmlModuleConfiguration
from ..errors import ConfigurationError, ErrorReporter
from ..model.entity import Entity
from ..model.files import EntityFileMatcher, OutputFile
from ..model.repository import EntityRepository
from ..templates.engine import RenderContext, TemplateEngine
from .filename import FilenameResolver, country_for
from .models import ExportResult, ExportSetting, TaskParameters
from .synthesizer import TemplateSynthesizer

logger = logging.getLogger(__name__)

SettingLike = Union[ExportSetting, Mapping[str, Any], None]


class ExportHtmlTask:
    """Renders entities to html files.

    Parameters:
        query: Restricts the entities to the given repository query
        export_name: Entity export profile to read (``export.<name>``)
        filter_callbacks: Filter overrides installed for every render
        file_path_template / file_name_template: Task level filename templates

    Entity properties:
        export.html: list of settings (see ``ExportSetting``), one file per
            setting and configured language

    Each (entity, setting, language) render is isolated: a failure is handed
    to the error reporter and the remaining renders carry on.
    """

    def __init__(
        self,
        repository: EntityRepository,
        engine: TemplateEngine,
        file_matcher: EntityFileMatcher,
        configuration: HtmlModuleConfiguration,
        error_reporter: Optional[ErrorReporter] = None,
        **parameters: Any,
    ) -> None:
        self.repository = repository
        self.engine = engine
        self.configuration = configuration
        self.error_reporter = error_reporter or ErrorReporter()
        self.filename_resolver = FilenameResolver(configuration)
        self.synthesizer = TemplateSynthesizer(
            file_matcher, engine.sites_path, engine.extension
        )
        self.parameters = self.prepare_parameters(**parameters)

    def prepare_parameters(
        self, base: Optional[TaskParameters] = None, **overrides: Any
    ) -> TaskParameters:
        """Merge ``overrides`` into ``base`` and fill in defaults."""
        params = dataclasses.replace(base) if base else TaskParameters()
        for name, value in overrides.items():
            if not hasattr(params, name):
                raise TypeError(f"Unknown export parameter: {name}")
            if value is not None:
                setattr(params, name, value)
        if params.export_name is None:
            params.export_name = self.configuration.export_name
        params.filter_callbacks = dict(params.filter_callbacks or {})
        return params

    async def render_file(
        self,
        filename: str,
        entity: Entity,
        setting: Optional[ExportSetting] = None,
        language: Optional[str] = None,
        configuration: Optional[Dict[str, Any]] = None,
        parameters: Optional[TaskParameters] = None,
    ) -> OutputFile:
        """Render one entity in one language.

        Raises:
            FileMatchError: If the template lookup fails
            RenderError: If the template engine fails
        """
        params = parameters or self.parameters
        plan = await self.synthesizer.synthesize(entity, setting)
        language = language or self.configuration.language
        context = RenderContext(
            entity=entity,
            language=language,
            country=country_for(language),
            configuration=configuration or {},
            filter_callbacks=params.filter_callbacks,
        )

        start_time = time.time()
        contents = await self.engine.render(plan.source, context)
        logger.debug(
            f"Rendered <{entity}> as <{filename}> ({plan.kind.value}) "
            f"in {time.time() - start_time:.3f}s"
        )
        return OutputFile.from_text(filename, contents)

    async def render_entity(
        self,
        entity: Optional[Entity],
        setting: SettingLike = None,
        parameters: Optional[TaskParameters] = None,
    ) -> List[OutputFile]:
        """Render ``entity`` once per configured language, in language order."""
        if not entity:
            logger.warning(f"{type(self).__name__}.render_entity - No entity given")
            return []

        params = parameters or self.parameters
        try:
            export_setting = ExportSetting.parse(setting)
        except (TypeError, ValueError) as e:
            self.error_reporter.report(e, entity=entity, setting=_as_dict(setting))
            return []

        result = []
        for language in self.configuration.languages:
            try:
                filename = self.filename_resolver.resolve(
                    entity,
                    language,
                    export_setting,
                    file_path_template=params.file_path_template,
                    file_name_template=params.file_name_template,
                )
                configuration = {**export_setting.configuration, "language": language}
                result.append(
                    await self.render_file(
                        filename, entity, export_setting, language, configuration, params
                    )
                )
            except Exception as e:
                self.error_reporter.report(
                    e, entity=entity, setting=export_setting.to_dict(), language=language
                )
        return result

    async def process_entity(
        self, entity: Optional[Entity], parameters: Optional[TaskParameters] = None
    ) -> List[OutputFile]:
        """Render every export setting of ``entity`` in declaration order."""
        if not entity:
            logger.warning(f"{type(self).__name__}.process_entity - No entity given")
            return []

        params = parameters or self.parameters
        path = f"export.{params.export_name}"
        if path not in entity.properties:
            return []

        settings = entity.properties.get_by_path(path)
        if settings is None:
            settings = []
        elif isinstance(settings, Mapping):
            settings = [settings]
        elif not isinstance(settings, list):
            self.error_reporter.report(
                ConfigurationError(f"{path} must be a list of settings, got {settings!r}"),
                entity=entity,
            )
            return []

        result = []
        for setting in settings:
            result.extend(await self.render_entity(entity, setting, params))
        return result

    async def stream(
        self, query: Optional[str] = None, **overrides: Any
    ) -> AsyncIterator[OutputFile]:
        """Yield the files of every entity matching ``query``.

        Repository failures propagate; render failures are isolated.
        """
        params = self.prepare_parameters(self.parameters, query=query, **overrides)
        entities = await self.repository.resolve_entities(params.query)
        logger.info(f"Exporting html for {len(entities)} entities matching '{params.query}'")

        for entity in entities:
            for file in await self.process_entity(entity, params):
                yield file

    async def run(self, query: Optional[str] = None, **overrides: Any) -> ExportResult:
        """Collect the whole stream into an ``ExportResult``."""
        start_time = time.time()
        failures_before = len(self.error_reporter.failures)
        files = [file async for file in self.stream(query, **overrides)]
        result = ExportResult(
            files=files,
            failures=self.error_reporter.failures[failures_before:],
            render_time=time.time() - start_time,
            metadata={"query": query or self.parameters.query},
        )
        logger.info(
            f"Exported {result.success_count} file(s), {result.error_count} failure(s) "
            f"in {result.render_time:.2f}s"
        )
        return result


def _as_dict(setting: SettingLike) -> Dict[str, Any]:
    if isinstance(setting, ExportSetting):
        return setting.to_dict()
    if isinstance(setting, Mapping):
        return dict(setting)
    return {}
