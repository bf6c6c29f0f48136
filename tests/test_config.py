"""
Тесты для системы конфигурации
"""

import os
import tempfile

from sdk_generator.config import CONFIG_FILE_NAME, GeneratorConfig


class TestGeneratorConfig:
    """Тесты конфигурации генератора"""

    def test_config_creation(self):
        """Тест создания конфигурации"""
        config = GeneratorConfig(url="http://localhost:8000", dirname="test_client")

        assert config.url == "http://localhost:8000"
        assert config.dirname == "test_client"

    def test_config_save_and_load(self):
        """Тест сохранения и загрузки конфигурации"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, "test_sdk.toml")

            original_config = GeneratorConfig(
                url="http://api.example.com",
                dirname="example_client",
                namespace="example_sdk",
                ignored_header_params=["Authorization"],
            )
            original_config.save_to_file(config_path)

            loaded_config = GeneratorConfig.from_file(config_path)

            assert loaded_config is not None
            assert loaded_config.url == "http://api.example.com"
            assert loaded_config.dirname == "example_client"
            assert loaded_config.namespace == "example_sdk"
            assert loaded_config.ignored_header_params == ["Authorization"]

    def test_config_file_not_exists(self):
        """Тест загрузки несуществующего конфига"""
        config = GeneratorConfig.from_file("nonexistent.toml")
        assert config is None

    def test_config_search_dir(self):
        """Конфиг ищется в указанной директории"""
        with tempfile.TemporaryDirectory() as temp_dir:
            GeneratorConfig(url="http://api.example.com").save_to_file(
                os.path.join(temp_dir, CONFIG_FILE_NAME)
            )

            loaded_config = GeneratorConfig.from_file(search_dir=temp_dir)

            assert loaded_config is not None
            assert loaded_config.url == "http://api.example.com"
            # dirname по умолчанию для конфигов без него
            assert loaded_config.dirname == "sdk_client"

    def test_unknown_keys_ignored(self):
        """Неизвестные ключи в файле не ломают загрузку"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, CONFIG_FILE_NAME)
            with open(config_path, "w") as f:
                f.write('url = "http://api.example.com"\nsomething_else = 1\n')

            loaded_config = GeneratorConfig.from_file(config_path)

            assert loaded_config is not None
            assert loaded_config.url == "http://api.example.com"

    def test_broken_file(self):
        """Битый toml считается отсутствующим конфигом"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, CONFIG_FILE_NAME)
            with open(config_path, "w") as f:
                f.write("url = [not toml")

            assert GeneratorConfig.from_file(config_path) is None

    def test_config_merge_with_args(self):
        """Тест объединения конфига с аргументами"""
        config = GeneratorConfig(url="http://localhost:8000", dirname="original_client")

        class MockArgs:
            def __init__(self):
                self.url = "http://api.new.com"
                self.dirname = None
                self.namespace = None

        merged = config.merge_with_args(MockArgs())

        assert merged.url == "http://api.new.com"  # Переписан из args
        assert merged.dirname == "original_client"  # Остался из config
        assert merged.namespace == "sdk_client"
        assert config.url == "http://localhost:8000"

    def test_default_values(self):
        """Тест значений по умолчанию"""
        config = GeneratorConfig()

        assert config.url is None
        assert config.dirname is None
        assert config.namespace == "sdk_client"
        assert config.body_methods == ["POST", "PUT", "PATCH"]
        assert config.preferred_media_types == ["application/json"]
        assert config.fallback_resource_name == "Resources"
        assert config.generate_component_dtos is True

    def test_module_path(self):
        """Пути модулей строятся от namespace"""
        config = GeneratorConfig(namespace="acme.sdk")

        assert config.module_path("responses", "users") == "acme.sdk.responses.users"
        assert config.module_path() == "acme.sdk"
