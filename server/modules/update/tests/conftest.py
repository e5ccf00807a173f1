"""
Общие фикстуры для тестов Update Module
"""

import pytest

from modules.update.config import UpdateConfig
from modules.update.providers.manifest_provider import ManifestProvider
from modules.update.providers.version_provider import VersionProvider
from modules.update.providers.artifact_provider import ArtifactProvider
from modules.update.providers.update_server_provider import UpdateServerProvider

MANIFEST_YML = """\
version: 1.2.0
files:
  - url: https://github.com/acme/app/releases/download/v1.2.0/App-1.2.0-mac.zip
    sha512: c2hhNTEyLXppcA==
    size: 1024
  - url: App-1.2.0.dmg
    sha512: c2hhNTEyLWRtZw==
    size: 2048
path: App-1.2.0-mac.zip
sha512: c2hhNTEyLXppcA==
releaseDate: '2024-05-01T10:00:00.000Z'
"""


@pytest.fixture
def release_dir(tmp_path):
    """Пустая директория релизов"""
    path = tmp_path / "release"
    path.mkdir()
    return path


@pytest.fixture
def write_manifest(release_dir):
    """Запись latest-mac.yml в директорию релизов"""
    def _write(content: str = MANIFEST_YML):
        manifest_path = release_dir / "latest-mac.yml"
        manifest_path.write_text(content, encoding="utf-8")
        return manifest_path
    return _write


@pytest.fixture
def config(release_dir):
    """Конфигурация, указывающая на временную директорию"""
    return UpdateConfig(release_dir=str(release_dir), port=3000, chunk_size=16)


@pytest.fixture
def manifest_provider(config):
    return ManifestProvider(config)


@pytest.fixture
def version_provider(config, manifest_provider):
    return VersionProvider(config, manifest_provider)


@pytest.fixture
def artifact_provider(config):
    return ArtifactProvider(config)


@pytest.fixture
def server_provider(config, manifest_provider, artifact_provider, version_provider):
    return UpdateServerProvider(config, manifest_provider, artifact_provider, version_provider)


@pytest.fixture
def manifest_yml():
    """Содержимое манифеста по умолчанию"""
    return MANIFEST_YML
