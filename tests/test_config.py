from pathlib import Path

import pytest

from skydeck.config import DEFAULT_API_URL, _deep_merge, load_config, resolve_settings
from skydeck.core.exceptions import ConfigurationError
from skydeck.providers.aws.config import AWS
from skydeck.providers.gcp.config import GCP
from skydeck.providers.proxmox.config import Proxmox

pytestmark = [pytest.mark.unit]


@pytest.fixture
def no_global(tmp_path: Path) -> Path:
    return tmp_path / "nonexistent.toml"


class TestDeepMerge:
    def test_shallow_override(self):
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self):
        base = {"providers": {"aws": {"region": "us-east-1"}, "gcp": {"zone": "a"}}}
        override = {"providers": {"aws": {"region": "us-west-2"}}}
        result = _deep_merge(base, override)
        assert result == {"providers": {"aws": {"region": "us-west-2"}, "gcp": {"zone": "a"}}}

    def test_empty_base(self):
        assert _deep_merge({}, {"a": 1}) == {"a": 1}

    def test_empty_override(self):
        assert _deep_merge({"a": 1}, {}) == {"a": 1}


class TestLoadConfig:
    def test_project_only(self, tmp_path: Path, no_global: Path):
        (tmp_path / "skydeck.toml").write_text('[api]\nbase_url = "http://deck:9000/api"\n')
        result = load_config(project_dir=tmp_path, global_path=no_global)
        assert result["api"]["base_url"] == "http://deck:9000/api"

    def test_merge_project_overrides_global(self, tmp_path: Path):
        global_toml = tmp_path / "defaults.toml"
        global_toml.write_text('[providers.gcp]\nzone = "us-central1-a"\ndisk_size_gb = 20\n')
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / "skydeck.toml").write_text('[providers.gcp]\nzone = "europe-west1-b"\n')
        result = load_config(project_dir=project_dir, global_path=global_toml)
        assert result["providers"]["gcp"] == {"zone": "europe-west1-b", "disk_size_gb": 20}

    def test_no_files_returns_empty_sections(self, tmp_path: Path, no_global: Path):
        result = load_config(project_dir=tmp_path / "nope", global_path=no_global)
        assert result == {"api": {}, "providers": {}, "console": {}, "logging": {}}

    def test_invalid_toml(self, tmp_path: Path, no_global: Path):
        (tmp_path / "skydeck.toml").write_text("[api\n")
        with pytest.raises(ConfigurationError):
            load_config(project_dir=tmp_path, global_path=no_global)


class TestResolveSettings:
    def test_defaults(self, tmp_path: Path, no_global: Path):
        settings = resolve_settings(project_dir=tmp_path, global_path=no_global, environ={})
        assert settings.api_url == DEFAULT_API_URL
        assert settings.token is None
        assert settings.management_path == "/gestio"
        assert settings.redirect_delay == 1.5
        assert dict(settings.providers) == {"gcp": GCP(), "aws": AWS()}

    def test_full_file(self, tmp_path: Path, no_global: Path):
        (tmp_path / "skydeck.toml").write_text(
            '[api]\n'
            'base_url = "https://deck.example.com/api"\n'
            'token = "file-token"\n'
            'timeout = 30\n'
            '\n'
            '[providers.proxmox]\n'
            'node = "pve1"\n'
            '\n'
            '[providers.aws]\n'
            'region = "eu-west-1"\n'
            '\n'
            '[console]\n'
            'management_path = "/clusters"\n'
            'redirect_delay = 0\n'
            'preferences_path = "prefs.json"\n'
            '\n'
            '[logging]\n'
            'level = "DEBUG"\n'
            'file = ""\n'
        )
        settings = resolve_settings(project_dir=tmp_path, global_path=no_global, environ={})
        assert settings.api_url == "https://deck.example.com/api"
        assert settings.token == "file-token"
        assert settings.timeout == 30
        assert dict(settings.providers) == {"proxmox": Proxmox(node="pve1"), "aws": AWS(region="eu-west-1")}
        assert settings.management_path == "/clusters"
        assert settings.redirect_delay == 0
        assert settings.preferences_path == Path("prefs.json")
        assert settings.logging.level == "DEBUG"
        assert settings.logging.file == ""

    def test_environment_overrides(self, tmp_path: Path, no_global: Path):
        (tmp_path / "skydeck.toml").write_text('[api]\nbase_url = "http://file/api"\ntoken = "file"\n')
        settings = resolve_settings(
            project_dir=tmp_path,
            global_path=no_global,
            environ={"SKYDECK_API_URL": "http://env/api", "SKYDECK_API_TOKEN": "env"},
        )
        assert settings.api_url == "http://env/api"
        assert settings.token == "env"

    @pytest.mark.parametrize("content", [
        '[api]\nbase_url = "ftp://deck"\n',
        '[api]\ntimeout = "soon"\n',
        '[console]\nredirect_delay = -1\n',
        '[providers.azure]\nregion = "westeurope"\n',
        '[providers.gcp]\nregion = "us-east-1"\n',
        '[logging]\nverbose = true\n',
    ])
    def test_invalid_settings(self, tmp_path: Path, no_global: Path, content: str):
        (tmp_path / "skydeck.toml").write_text(content)
        with pytest.raises(ConfigurationError):
            resolve_settings(project_dir=tmp_path, global_path=no_global, environ={})
