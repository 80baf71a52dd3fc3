"""Tests for configuration loading and resolution."""

import pytest

from htmlexport.config import (
    BuildSettings,
    EnvironmentSubstitutionError,
    HtmlModuleConfiguration,
    HtmlSettings,
    PathesConfiguration,
    PathesSettings,
    ProjectConfig,
    describe_project,
    find_config_file,
    load_project,
    load_project_config,
    substitute_environment_variables,
)
from htmlexport.errors import ConfigurationError, TemplateExpansionError


class TestEnvironmentSubstitution:
    """Test environment variable substitution."""

    def test_substitutes_set_variable(self, monkeypatch):
        monkeypatch.setenv("HTML_OUT", "/tmp/out")
        assert substitute_environment_variables("${HTML_OUT}/html") == "/tmp/out/html"

    def test_default_values(self, monkeypatch):
        monkeypatch.delenv("HTML_MISSING", raising=False)
        assert substitute_environment_variables("${HTML_MISSING:-fallback}") == "fallback"
        assert substitute_environment_variables("${HTML_MISSING:fallback}") == "fallback"

    def test_single_variable_is_coerced(self, monkeypatch):
        monkeypatch.setenv("HTML_BEAUTIFY", "true")
        monkeypatch.setenv("HTML_COUNT", "3")
        data = {"beautify": "${HTML_BEAUTIFY}", "count": "${HTML_COUNT}"}
        assert substitute_environment_variables(data) == {"beautify": True, "count": 3}

    def test_unset_variable_left_unchanged(self, monkeypatch):
        monkeypatch.delenv("HTML_MISSING", raising=False)
        assert substitute_environment_variables("${HTML_MISSING}") == "${HTML_MISSING}"

    def test_strict_mode_raises(self, monkeypatch):
        monkeypatch.delenv("HTML_MISSING", raising=False)
        with pytest.raises(EnvironmentSubstitutionError):
            substitute_environment_variables("${HTML_MISSING}", strict=True)

    def test_required_with_message(self, monkeypatch):
        monkeypatch.delenv("HTML_MISSING", raising=False)
        with pytest.raises(EnvironmentSubstitutionError, match="needed"):
            substitute_environment_variables("${HTML_MISSING:?needed}")

    def test_reserved_and_dotted_placeholders_untouched(self, monkeypatch):
        """Path and entity placeholders are left for later expansion."""
        monkeypatch.setenv("cache", "/should/not/be/used")
        value = "${cache}/${entity.idString}"
        assert substitute_environment_variables(value, reserved=("cache",)) == value

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("HTML_LANG", "de_DE")
        data = {"languages": ["${HTML_LANG}", "en_GB"], "nested": {"count": 1}}
        result = substitute_environment_variables(data)
        assert result == {"languages": ["de_DE", "en_GB"], "nested": {"count": 1}}


class TestLoadProjectConfig:
    """Test loading project configuration files."""

    def test_load_fixture_project(self, config_file):
        config = load_project_config(config_file)

        assert isinstance(config, ProjectConfig)
        assert config.languages == ["en_GB"]
        assert config.language == "en_GB"
        assert config.html.export_path == "${cache}/html/export"
        assert config.environments["production"].html.beautify is True
        assert config.environments["flat"].html.file_path_template == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_project_config(tmp_path / "missing.yaml")

    def test_invalid_extension(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        with pytest.raises(ConfigurationError, match="extension"):
            load_project_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "htmlexport.yaml"
        path.write_text("languages: [en_GB\n")
        with pytest.raises(ConfigurationError, match="Failed to parse"):
            load_project_config(path)

    def test_unknown_html_setting(self, tmp_path):
        path = tmp_path / "htmlexport.yaml"
        path.write_text("html:\n  beautifyy: true\n")
        with pytest.raises(ConfigurationError, match="validation failed"):
            load_project_config(path)

    def test_empty_languages_rejected(self, tmp_path):
        path = tmp_path / "htmlexport.yaml"
        path.write_text("languages: []\n")
        with pytest.raises(ConfigurationError):
            load_project_config(path)

    def test_environment_variables_in_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HTML_EXPORT_LANG", "de_DE")
        path = tmp_path / "htmlexport.yaml"
        path.write_text("languages:\n  - ${HTML_EXPORT_LANG}\n  - en_GB\n")
        config = load_project_config(path)
        assert config.languages == ["de_DE", "en_GB"]
        assert config.language == "de_DE"

    def test_find_config_file_in_parent(self, project_dir):
        nested = project_dir / "sites" / "base"
        assert find_config_file(nested) == project_dir / "htmlexport.yaml"

    def test_find_config_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_config_file(tmp_path)

    def test_describe_project(self, config_file):
        config = load_project_config(config_file)
        content = describe_project(config, "production")
        assert "exportPath" in content
        assert "environment: production" in content


class TestPathesConfiguration:
    """Test logical path resolution."""

    def test_defaults_relative_to_base(self, tmp_path):
        pathes = PathesConfiguration(PathesSettings(), base_path=tmp_path)
        assert pathes.root == tmp_path.absolute()
        assert pathes.sites == tmp_path.absolute() / "sites"
        assert pathes.cache == tmp_path.absolute() / ".cache"

    @pytest.mark.asyncio
    async def test_resolve_logical_path(self, tmp_path):
        pathes = PathesConfiguration(PathesSettings(), base_path=tmp_path)
        resolved = await pathes.resolve("${cache}/html/export")
        assert resolved == tmp_path.absolute() / ".cache" / "html" / "export"

    @pytest.mark.asyncio
    async def test_resolve_relative_path(self, tmp_path):
        pathes = PathesConfiguration(PathesSettings(), base_path=tmp_path)
        assert await pathes.resolve("build/html") == tmp_path.absolute() / "build" / "html"

    @pytest.mark.asyncio
    async def test_resolve_unknown_placeholder(self, tmp_path):
        pathes = PathesConfiguration(PathesSettings(), base_path=tmp_path)
        with pytest.raises(TemplateExpansionError):
            await pathes.resolve("${unknown}/html")

    def test_load_project_uses_config_directory(self, config_file, project_dir):
        config, pathes = load_project(config_file)
        assert pathes.root == project_dir.absolute()
        assert pathes.sites == project_dir.absolute() / "sites"


class TestHtmlModuleConfiguration:
    """Test html settings precedence."""

    def test_defaults(self):
        configuration = HtmlModuleConfiguration()
        assert configuration.languages == ["en_GB"]
        assert configuration.language == "en_GB"
        assert configuration.export_path == "${cache}/html/export"
        assert configuration.file_path_template == "${entity.pathString}"
        assert configuration.file_name_template == "${entity.idString}"
        assert configuration.beautify is False
        assert configuration.export_name == "html"

    def test_build_environment_overrides_global(self):
        configuration = HtmlModuleConfiguration(
            html=HtmlSettings(fileNameTemplate="global", beautify=False),
            build=BuildSettings(html=HtmlSettings(beautify=True)),
        )
        assert configuration.beautify is True
        assert configuration.file_name_template == "global"

    def test_empty_template_is_kept(self):
        """An explicitly empty template overrides the default."""
        configuration = HtmlModuleConfiguration(
            build=BuildSettings(html=HtmlSettings(filePathTemplate=""))
        )
        assert configuration.file_path_template == ""

    def test_from_config_with_environment(self, config_file):
        config = load_project_config(config_file)
        assert HtmlModuleConfiguration.from_config(config).beautify is False
        assert HtmlModuleConfiguration.from_config(config, "production").beautify is True
        assert HtmlModuleConfiguration.from_config(config, "unknown").beautify is False
