# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the configuration system and CsrfProperties binding."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from edgecsrf.config.properties.csrf import CsrfProperties, RotationPolicy
from edgecsrf.core.config import Config, config_properties


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"app": {"name": "test-service", "port": 8080}})
        assert config.get("app.name") == "test-service"
        assert config.get("app.port") == 8080

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("EDGECSRF_CSRF_MAX_AGE", "60")
        config = Config({"edgecsrf": {"csrf": {"max-age": 86400}}})
        assert config.get("edgecsrf.csrf.max-age") == "60"

    def test_env_key(self):
        assert Config.env_key("edgecsrf.csrf.secret-cookie-name") == "EDGECSRF_CSRF_SECRET_COOKIE_NAME"

    def test_placeholder_with_default(self):
        config = Config({"edgecsrf": {"csrf": {"environment": "${EDGECSRF_TEST_UNSET_VAR:staging}"}}})
        assert config.get("edgecsrf.csrf.environment") == "staging"

    def test_placeholder_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEPLOY_ENV", "production")
        config = Config({"env": "${DEPLOY_ENV}"})
        assert config.get("env") == "production"

    def test_unresolvable_placeholder(self):
        with pytest.raises(ValueError):
            Config({"key": "${EDGECSRF_TEST_NOPE}"}).get("key")


class TestConfigSources:
    def test_library_defaults(self, tmp_path: Path):
        config = Config.from_sources(tmp_path)
        assert config.get("edgecsrf.csrf.header-name") == "X-CSRF-Token"
        assert config.loaded_sources == ["edgecsrf-defaults.yaml (library defaults)"]

    def test_yaml_overrides_defaults(self, tmp_path: Path):
        (tmp_path / "edgecsrf.yaml").write_text("edgecsrf:\n  csrf:\n    max-age: 3600\n")
        config = Config.from_sources(tmp_path)
        assert config.get("edgecsrf.csrf.max-age") == 3600
        assert config.get("edgecsrf.csrf.token-cookie-name") == "csrf_token"

    def test_toml_in_config_dir(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "edgecsrf.toml").write_text('[edgecsrf.csrf]\nsame-site = "Lax"\n')
        config = Config.from_sources(tmp_path)
        assert config.get("edgecsrf.csrf.same-site") == "Lax"

    def test_profile_overlay_wins(self, tmp_path: Path):
        (tmp_path / "edgecsrf.yaml").write_text("edgecsrf:\n  csrf:\n    environment: development\n")
        (tmp_path / "edgecsrf-prod.yaml").write_text("edgecsrf:\n  csrf:\n    environment: production\n")
        config = Config.from_file(tmp_path / "edgecsrf.yaml", active_profiles=["prod"])
        assert config.get("edgecsrf.csrf.environment") == "production"

    def test_arbitrary_file_name(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("app:\n  name: other\n")
        config = Config.from_file(path, load_defaults=False)
        assert config.get("app.name") == "other"
        assert config.get("edgecsrf.csrf.header-name") is None


class TestBind:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="database")
        @dataclass
        class DatabaseConfig:
            url: str = "sqlite:///test.db"
            pool_size: int = 5

        config = Config({"database": {"url": "postgresql://localhost/mydb", "pool-size": "20"}})
        db_config = config.bind(DatabaseConfig)
        assert db_config.url == "postgresql://localhost/mydb"
        assert db_config.pool_size == 20

    def test_requires_decorator(self):
        @dataclass
        class Plain:
            x: int = 1

        with pytest.raises(ValueError):
            Config({}).bind(Plain)

    def test_csrf_defaults(self):
        props = Config({}).bind(CsrfProperties)
        assert props == CsrfProperties()
        assert props.secret_cookie_name == "__Host-csrf_secret"
        assert props.max_age == 86400
        assert props.rotation is RotationPolicy.EVERY_REQUEST

    def test_csrf_from_library_defaults(self, tmp_path: Path):
        props = Config.from_sources(tmp_path).bind(CsrfProperties)
        assert set(props.unsafe_methods) == {"POST", "PUT", "PATCH", "DELETE"}
        assert props.exempt_paths == ("/api/webhooks/stripe", "/api/webhooks/")
        assert props.protected_paths == ("/api/",)

    def test_csrf_coercion(self):
        config = Config({
            "edgecsrf": {
                "csrf": {
                    "rotation": "preserve",
                    "max-age": "600",
                    "unsafe-methods": ["POST", "DELETE"],
                    "exempt_paths": "/hooks/, /callbacks/",
                }
            }
        })
        props = config.bind(CsrfProperties)
        assert props.rotation is RotationPolicy.PRESERVE
        assert props.max_age == 600
        assert props.unsafe_methods == ("POST", "DELETE")
        assert props.exempt_paths == ("/hooks/", "/callbacks/")

    def test_csrf_env_override(self, monkeypatch):
        monkeypatch.setenv("EDGECSRF_CSRF_PROTECTED_PATHS", "/rpc/,/graphql")
        props = Config({}).bind(CsrfProperties)
        assert props.protected_paths == ("/rpc/", "/graphql")

    def test_bad_value_reports_field(self):
        config = Config({"edgecsrf": {"csrf": {"rotation": "hourly"}}})
        with pytest.raises(ValueError, match="rotation"):
            config.bind(CsrfProperties)
