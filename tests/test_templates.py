"""Tests for the template engine, loader and custom filters."""

import pytest
from jinja2 import Environment
from jinja2.sandbox import SandboxedEnvironment

from htmlexport.errors import RenderError
from htmlexport.model import FileSystemRepository
from htmlexport.templates import (
    EntityTemplateLoader,
    RenderContext,
    TemplateEngine,
    empty,
    image_url,
    link_url,
    module_classes,
    not_empty,
)


@pytest.fixture
def repository(project_dir):
    return FileSystemRepository(project_dir / "sites")


@pytest.fixture
def engine(project_dir):
    return TemplateEngine(project_dir / "sites")


async def entity_for(repository, path):
    return (await repository.resolve_entities(path))[0]


class TestFilters:
    """The filters are wrapped with pass_context; call the wrapped functions."""

    def test_module_classes(self):
        assert module_classes.__wrapped__("hero big", "m-teaser") == "m-teaser--hero m-teaser--big"
        assert module_classes.__wrapped__(["hero", "m-teaser--big"], "m-teaser") == (
            "m-teaser--hero m-teaser--big"
        )
        assert module_classes.__wrapped__(None, "m-teaser") == ""

    def test_empty(self):
        assert empty.__wrapped__(None)
        assert empty.__wrapped__("")
        assert empty.__wrapped__([])
        assert not empty.__wrapped__("x")
        assert not empty.__wrapped__(0)
        assert not_empty.__wrapped__({"a": 1})

    def test_image_url(self):
        assert image_url.__wrapped__("teaser.png") == "/images/teaser.png"
        assert image_url.__wrapped__("https://cdn/x.png") == "https://cdn/x.png"
        assert image_url.__wrapped__("teaser.png", 200, 100) == "/images/teaser.png?w=200&h=100"

    def test_link_url(self):
        assert link_url.__wrapped__({"url": "/about"}) == "/about"
        assert link_url.__wrapped__("/contact") == "/contact"
        assert link_url.__wrapped__(None) == "JavaScript:;"

    def test_filter_aliases_registered(self, engine):
        env = engine.environment()
        for name in ("module_classes", "moduleClasses", "notempty", "not_empty", "imageUrl", "linkUrl"):
            assert name in env.filters


class TestEntityTemplateLoader:
    """Test the site-wide macro index."""

    def test_install_macros(self, project_dir, repository):
        loader = EntityTemplateLoader(project_dir / "sites", repository.sites["base"])
        env = Environment(loader=loader, enable_async=True)
        loader.install_macros(env)
        assert callable(env.globals["m_teaser"])
        assert callable(env.globals["m_teaser_hero"])
        assert callable(env.globals["e_image"])

    def test_site_macros_shadow_inherited(self, project_dir, repository):
        loader = EntityTemplateLoader(project_dir / "sites", repository.sites["extended"])
        macros = loader.macros(Environment(loader=loader))
        assert macros["e_image"] == "extended/elements/e-image/e-image.j2"
        assert macros["m_teaser"] == "base/modules/m-teaser/m-teaser.j2"

    def test_invalid_templates_skipped(self, project_dir, repository, write_template):
        write_template("base/elements/e-bad/e-bad.j2", "{% macro e_bad( %}")
        loader = EntityTemplateLoader(project_dir / "sites", repository.sites["base"])
        macros = loader.macros(Environment(loader=loader))
        assert "e_bad" not in macros
        assert "m_teaser" in macros

    def test_invalidate(self, project_dir, repository, write_template):
        loader = EntityTemplateLoader(project_dir / "sites", repository.sites["base"])
        env = Environment(loader=loader)
        assert "e_new" not in loader.macros(env)
        write_template("base/elements/e-new/e-new.j2", "{% macro e_new() %}new{% endmacro %}")
        assert "e_new" not in loader.macros(env)
        loader.invalidate()
        assert "e_new" in loader.macros(env)


class TestTemplateEngine:
    """Test rendering against the fixture sites."""

    @pytest.mark.asyncio
    async def test_render_macro(self, engine, repository):
        entity = await entity_for(repository, "base/modules/m-teaser")
        html = await engine.render(
            "{{ m_teaser(headline='Hello') }}",
            RenderContext(entity=entity, language="de_DE", configuration={"language": "de_DE"}),
        )
        assert '<div class="m-teaser ' in html
        assert 'data-language="de_DE"' in html
        assert '<h2 class="m-teaser__headline">Hello</h2>' in html
        assert 'src="/images/teaser.png"' in html

    @pytest.mark.asyncio
    async def test_render_uses_site_macros(self, engine, repository):
        entity = await entity_for(repository, "extended/modules/m-teaser")
        html = await engine.render("{{ m_teaser() }}", RenderContext(entity=entity))
        assert "e-image--extended" in html

    @pytest.mark.asyncio
    async def test_context_variables(self, engine, repository):
        entity = await entity_for(repository, "base/modules/m-teaser")
        html = await engine.render(
            "{{ site.name }}|{{ entity.idString }}|{{ location.customPath }}|{{ request }}",
            RenderContext(entity=entity, custom_path="/x"),
        )
        assert html == "base|m-teaser|/x|False"

    @pytest.mark.asyncio
    async def test_filter_callbacks(self, engine, repository):
        """A callback registered under an alias replaces the filter."""
        entity = await entity_for(repository, "base/modules/m-teaser")
        html = await engine.render(
            "{{ m_teaser() }}",
            RenderContext(
                entity=entity,
                filter_callbacks={"imageUrl": lambda value, *args: f"cdn://{value}"},
            ),
        )
        assert 'src="cdn://teaser.png"' in html

    @pytest.mark.asyncio
    async def test_callbacks_do_not_leak(self, engine, repository):
        """Callbacks of one render are not visible to the next."""
        entity = await entity_for(repository, "base/modules/m-teaser")
        await engine.render(
            "{{ m_teaser() }}",
            RenderContext(entity=entity, filter_callbacks={"image_url": lambda value: "leak"}),
        )
        html = await engine.render("{{ m_teaser() }}", RenderContext(entity=entity))
        assert "leak" not in html
        assert 'src="/images/teaser.png"' in html

    @pytest.mark.asyncio
    async def test_undefined_variable_raises(self, engine, repository):
        entity = await entity_for(repository, "base/modules/m-teaser")
        with pytest.raises(RenderError, match="base/modules/m-teaser"):
            await engine.render("{{ missing }}", RenderContext(entity=entity))

    @pytest.mark.asyncio
    async def test_syntax_error_raises(self, engine, repository):
        entity = await entity_for(repository, "base/modules/m-teaser")
        with pytest.raises(RenderError):
            await engine.render("{{ m_teaser( }}", RenderContext(entity=entity))

    def test_compile_cache(self, engine):
        first = engine.compile_template("{{ 1 }}")
        assert engine.compile_template("{{ 1 }}") is first
        engine.invalidate()
        assert engine.compile_template("{{ 1 }}") is not first

    def test_cache_size(self, project_dir):
        engine = TemplateEngine(project_dir / "sites", cache_size=2)
        for index in range(3):
            engine.compile_template(f"{{{{ {index} }}}}")
        assert len(engine._template_cache) == 2

    def test_sandbox(self, project_dir):
        engine = TemplateEngine(project_dir / "sites", enable_sandbox=True)
        assert isinstance(engine.environment(), SandboxedEnvironment)
        assert not isinstance(TemplateEngine(project_dir / "sites").environment(), SandboxedEnvironment)

    @pytest.mark.asyncio
    async def test_mutually_referencing_macros(self, engine, repository, write_template):
        """Macros of two templates may call each other."""
        write_template(
            "base/elements/e-a/e-a.j2",
            "{% macro e_a(depth=0) %}A{% if depth < 1 %}{{ e_b(depth=depth + 1) }}{% endif %}{% endmacro %}",
        )
        write_template(
            "base/elements/e-b/e-b.j2",
            "{% macro e_b(depth=0) %}B{% if depth < 1 %}{{ e_a(depth=depth + 1) }}{% endif %}{% endmacro %}",
        )
        entity = await entity_for(repository, "base/elements/e-a")
        assert await engine.render("{{ e_a() }}", RenderContext(entity=entity)) == "AB"
        assert await engine.render("{{ e_b() }}", RenderContext(entity=entity)) == "BA"
