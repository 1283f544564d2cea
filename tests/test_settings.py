"""
Tests for settings loading
"""
import pytest

from estatehub import settings
from estatehub.app import create_app


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.setattr(settings, '_cached_settings', None)
    for name in settings.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    yield
    settings._cached_settings = None


class TestLoadSettings:
    """YAML file merged over defaults, then environment overrides"""

    def test_defaults_without_file(self, tmp_path):
        loaded = settings.load_settings(force=True, config_file=str(tmp_path / 'missing.yaml'))
        assert loaded['cache']['ttl'] == {'property_list': 300, 'property_detail': 600, 'property_search': 300}
        assert loaded['cache']['invalidate_search_on_write'] is False
        assert loaded['auth']['jwt_algorithm'] == 'HS256'

    def test_file_is_deep_merged(self, tmp_path):
        config = tmp_path / 'settings.yaml'
        config.write_text("cache:\n  ttl:\n    property_detail: 60\nlogging:\n  level: DEBUG\n")

        loaded = settings.load_settings(force=True, config_file=str(config))
        assert loaded['cache']['ttl']['property_detail'] == 60
        assert loaded['cache']['ttl']['property_list'] == 300
        assert loaded['logging']['level'] == 'DEBUG'
        assert loaded['logging']['format'] == 'console'

    def test_empty_file(self, tmp_path):
        config = tmp_path / 'settings.yaml'
        config.write_text("")
        loaded = settings.load_settings(force=True, config_file=str(config))
        assert loaded['redis']['url']

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv('REDIS_URL', 'redis://cache:6379/2')
        monkeypatch.setenv('JWT_EXPIRES_MINUTES', '15')
        monkeypatch.setenv('CACHE_INVALIDATE_SEARCH_ON_WRITE', 'true')

        loaded = settings.load_settings(force=True, config_file=str(tmp_path / 'missing.yaml'))
        assert loaded['redis']['url'] == 'redis://cache:6379/2'
        assert loaded['auth']['jwt_expires_minutes'] == 15
        assert loaded['cache']['invalidate_search_on_write'] is True

    def test_invalid_environment_value_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv('JWT_EXPIRES_MINUTES', 'forever')
        loaded = settings.load_settings(force=True, config_file=str(tmp_path / 'missing.yaml'))
        assert loaded['auth']['jwt_expires_minutes'] == 60 * 24 * 7

    def test_settings_are_cached(self, tmp_path):
        first = settings.load_settings(force=True, config_file=str(tmp_path / 'missing.yaml'))
        assert settings.load_settings() is first


class TestAppConfig:
    """create_app derives Flask config from settings"""

    def test_ttl_override_reaches_app(self, tmp_path, monkeypatch, redis_double):
        config = tmp_path / 'settings.yaml'
        config.write_text("cache:\n  ttl:\n    property_search: 30\n")
        settings.load_settings(force=True, config_file=str(config))

        app = create_app({'TESTING': True, 'SQLALCHEMY_DATABASE_URI': 'sqlite://', 'REDIS_CLIENT': redis_double})
        assert app.config['CACHE_TTL'] == {'property_list': 300, 'property_detail': 600, 'property_search': 30}
        assert app.config['INVALIDATE_SEARCH_ON_WRITE'] is False
