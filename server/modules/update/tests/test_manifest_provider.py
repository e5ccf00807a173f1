"""
Тесты для Manifest Provider
"""

import pytest
from unittest.mock import patch

from modules.update.errors import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestReadError,
    NotFoundError,
    ParseError,
)
from modules.update.providers.manifest_provider import url_basename


class TestManifestProvider:
    """Тесты чтения latest-mac.yml"""

    def test_load_manifest(self, manifest_provider, write_manifest):
        """Тест разбора корректного манифеста"""
        write_manifest()

        manifest = manifest_provider.load_manifest()

        assert manifest.version == "1.2.0"
        assert manifest.path == "App-1.2.0-mac.zip"
        assert manifest.sha512 == "c2hhNTEyLXppcA=="
        assert manifest.release_date == "2024-05-01T10:00:00.000Z"
        assert len(manifest.files) == 2
        assert manifest.files[1].url == "App-1.2.0.dmg"
        assert manifest.files[1].size == 2048

    def test_missing_manifest(self, manifest_provider):
        """Нет файла -> ManifestNotFoundError"""
        with pytest.raises(ManifestNotFoundError) as exc_info:
            manifest_provider.load_manifest()

        assert isinstance(exc_info.value, NotFoundError)
        assert manifest_provider.exists() is False

    def test_manifest_is_reread_on_every_call(self, manifest_provider, write_manifest):
        """Манифест не кэшируется"""
        write_manifest()
        assert manifest_provider.load_manifest().version == "1.2.0"

        write_manifest("version: 1.3.0\nfiles:\n  - url: App-1.3.0.dmg\n    sha512: x\n    size: 1\n")
        assert manifest_provider.load_manifest().version == "1.3.0"

    @pytest.mark.parametrize("content", [
        "version: [1.2.0\n",
        "- just\n- a list\n",
        "files:\n  - url: a.dmg\n    sha512: x\n    size: 1\n",
        "version: 1.2.0\n",
        "version: 1.2.0\nfiles: []\n",
        "version: 1.2.0\nfiles:\n  - url: a.dmg\n    size: 1\n",
        "version: 1.2.0\nfiles:\n  - url: a.dmg\n    sha512: x\n    size: big\n",
        "version: 1.2.0\nfiles:\n  - just-a-string\n",
    ])
    def test_invalid_manifest(self, manifest_provider, write_manifest, content):
        """Невалидный YAML или нет обязательных полей -> ManifestParseError"""
        write_manifest(content)

        with pytest.raises(ManifestParseError) as exc_info:
            manifest_provider.load_manifest()

        assert isinstance(exc_info.value, ParseError)

    @pytest.mark.parametrize("raw_version, expected", [
        ("1.2", "1.2"),
        ("1.10", "1.10"),
        ("2", "2"),
        ("1.20", "1.20"),
    ])
    def test_numeric_version_keeps_file_text(self, manifest_provider, raw_version, expected):
        """Числовой version берётся текстом из файла, без потери нулей"""
        raw = f"version: {raw_version}\nfiles:\n  - url: a.dmg\n    sha512: x\n    size: 1\n".encode()

        manifest = manifest_provider.parse(raw)

        assert manifest.version == expected

    def test_unreadable_manifest(self, manifest_provider, write_manifest):
        """Файл есть, но не читается -> ManifestReadError (ParseError)"""
        write_manifest()

        with patch("modules.update.providers.manifest_provider.open", side_effect=PermissionError("denied"), create=True):
            with pytest.raises(ManifestReadError) as exc_info:
                manifest_provider.load_manifest()

        assert isinstance(exc_info.value, ParseError)
        assert not isinstance(exc_info.value, NotFoundError)

    def test_unquoted_release_date(self, manifest_provider):
        """Дата без кавычек (YAML timestamp) возвращается в формате electron-builder"""
        raw = b"version: 1.2.0\nfiles:\n  - url: a.dmg\n    sha512: x\n    size: 1\nreleaseDate: 2024-05-01T10:00:00.000Z\n"

        manifest = manifest_provider.parse(raw)

        assert manifest.release_date == "2024-05-01T10:00:00.000Z"

    def test_optional_fields_default_to_none(self, manifest_provider):
        """path, sha512 и releaseDate необязательны"""
        manifest = manifest_provider.parse(b"version: 1.2.0\nfiles:\n  - url: a.dmg\n    sha512: x\n    size: 1\n")

        assert manifest.path is None
        assert manifest.sha512 is None
        assert manifest.release_date is None

    def test_describe(self, manifest_provider, write_manifest):
        """Сводка для логов"""
        write_manifest()

        summary = manifest_provider.describe(manifest_provider.load_manifest())

        assert summary["version"] == "1.2.0"
        assert summary["files"] == [
            {"name": "App-1.2.0-mac.zip", "size": 1024},
            {"name": "App-1.2.0.dmg", "size": 2048},
        ]


class TestUrlBasename:
    """Тесты извлечения имени файла из url"""

    @pytest.mark.parametrize("url, expected", [
        ("App-1.2.0.dmg", "App-1.2.0.dmg"),
        ("https://example.com/releases/v1.2.0/App-1.2.0.dmg", "App-1.2.0.dmg"),
        ("https://example.com/App-1.2.0.dmg?token=abc", "App-1.2.0.dmg"),
        ("nested/dir/App.zip", "App.zip"),
        ("..\\..\\App.zip", "App.zip"),
    ])
    def test_url_basename(self, url, expected):
        assert url_basename(url) == expected
