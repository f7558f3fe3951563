"""
Tests for loaded-app models, the in-memory registry and asset paths.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from platform_apps.models import AppManifest, LoadedApp
from platform_apps.paths import (
    asset_filename_from_url,
    get_app_assets_dir,
    is_valid_asset_filename,
)
from platform_apps.registry import PlatformAppsRegistry

MANIFEST = AppManifest(name="Alerts", version="1.2.0")


def packed_app(app_id="app-1", **kwargs):
    return LoadedApp(
        id=app_id,
        manifest=MANIFEST,
        app_url="https://apps.example.com/app-1/1.2.0",
        **kwargs,
    )


class TestLoadedApp:
    def test_packed_base_url_gets_trailing_slash(self):
        assert packed_app().base_url == "https://apps.example.com/app-1/1.2.0/"

    def test_unpacked_app_uses_dev_server(self):
        app = LoadedApp(id="dev", manifest=MANIFEST, unpacked=True, app_path="/src/app", dev_port=8081)
        assert app.base_url == "http://localhost:8081/"

    def test_no_url_means_no_base(self):
        assert LoadedApp(id="x", manifest=MANIFEST).base_url is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            LoadedApp(id="", manifest=MANIFEST)


class TestPlatformAppsRegistry:
    def test_get_app(self):
        registry = PlatformAppsRegistry([packed_app()])
        assert registry.get_app("app-1").manifest.name == "Alerts"
        assert registry.get_app("unknown") is None

    def test_unload(self):
        registry = PlatformAppsRegistry([packed_app()])
        registry.unload_app("app-1")
        registry.unload_app("app-1")
        assert registry.get_app("app-1") is None

    def test_enabled_apps(self):
        registry = PlatformAppsRegistry([packed_app(), packed_app("app-2", enabled=False)])
        assert [app.id for app in registry.enabled_apps] == ["app-1"]

    def test_reload_replaces_app(self):
        registry = PlatformAppsRegistry([packed_app()])
        registry.load_app(packed_app(enabled=False))
        assert registry.get_app("app-1").enabled is False

    def test_relative_asset_resolves_against_app_url(self):
        registry = PlatformAppsRegistry([packed_app()])
        assert (
            registry.get_asset_url("app-1", "assets/transition.mp4")
            == "https://apps.example.com/app-1/1.2.0/assets/transition.mp4"
        )
        assert (
            registry.get_asset_url("app-1", "/transition.mp4")
            == "https://apps.example.com/app-1/1.2.0/transition.mp4"
        )

    def test_absolute_asset_is_unchanged(self):
        registry = PlatformAppsRegistry([packed_app()])
        url = "https://cdn.example.com/x/transition.mp4"
        assert registry.get_asset_url("app-1", url) == url

    def test_unknown_app_has_no_asset_url(self):
        assert PlatformAppsRegistry().get_asset_url("nope", "a.mp4") is None


class TestAssetPaths:
    def test_app_assets_dir(self):
        assert get_app_assets_dir("/data", "app-1") == Path("/data/Media/Apps/app-1")

    def test_custom_subpath(self):
        assert get_app_assets_dir("/data", "app-1", ["assets"]) == Path("/data/assets/app-1")

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://cdn.example.com/a/transition.mp4", "transition.mp4"),
            ("https://cdn.example.com/a/transition.mp4?v=2#t", "transition.mp4"),
            ("https://cdn.example.com/a/my%20clip.webm", "my clip.webm"),
            ("https://cdn.example.com/a/", ""),
            ("https://cdn.example.com/a/%2E", "."),
            ("https://cdn.example.com/..%5C..%5Cevil.mp4", "..\\..\\evil.mp4"),
        ],
    )
    def test_filename_from_url(self, url, expected):
        assert asset_filename_from_url(url) == expected

    @pytest.mark.parametrize("name", ["transition.mp4", "my clip.webm", "a..b.png", ".hidden"])
    def test_plain_names_are_valid(self, name):
        assert is_valid_asset_filename(name)

    @pytest.mark.parametrize(
        "name",
        ["", ".", "..", "a/b.mp4", "..\\..\\evil.mp4", "dir\\clip.mp4", "clip\x00.mp4"],
    )
    def test_unsafe_names_are_rejected(self, name):
        assert not is_valid_asset_filename(name)

    def test_encoded_dot_segment_decodes_to_parent_name(self):
        assert asset_filename_from_url("https://cdn.example.com/%2E%2E") == ".."
        assert not is_valid_asset_filename(asset_filename_from_url("https://cdn.example.com/%2E%2E"))
