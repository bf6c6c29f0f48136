"""
Конфигурация для генерации SDK
"""

import os
from dataclasses import asdict, dataclass, field
from typing import List, Optional

import toml

CONFIG_FILE_NAME = "sdk.toml"


@dataclass
class GeneratorConfig:
    """Конфигурация генератора SDK"""

    url: Optional[str] = None
    dirname: Optional[str] = None

    # Пространства имен сгенерированного пакета
    namespace: str = "sdk_client"
    request_namespace_suffix: str = "requests"
    response_namespace_suffix: str = "responses"
    dto_namespace_suffix: str = "dto"

    # Группа ресурсов для эндпоинтов без тега
    fallback_resource_name: str = "Resources"

    ignored_body_params: List[str] = field(default_factory=list)
    ignored_query_params: List[str] = field(default_factory=list)
    ignored_header_params: List[str] = field(default_factory=list)

    body_methods: List[str] = field(default_factory=lambda: ["POST", "PUT", "PATCH"])
    preferred_media_types: List[str] = field(
        default_factory=lambda: ["application/json"]
    )
    generate_component_dtos: bool = True

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["GeneratorConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except (OSError, toml.TomlDecodeError):
            return None

        known = {name for name in cls.__dataclass_fields__}
        values = {k: v for k, v in config_data.items() if k in known}
        values.setdefault("dirname", "sdk_client")

        return cls(**values)

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        # toml не умеет сохранять None
        config_data = {k: v for k, v in asdict(self).items() if v is not None}

        with open(config_path, "w") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "GeneratorConfig":
        """Объединение с аргументами командной строки"""
        values = asdict(self)
        values["url"] = getattr(args, "url", None) or self.url
        values["dirname"] = getattr(args, "dirname", None) or self.dirname
        values["namespace"] = getattr(args, "namespace", None) or self.namespace

        return GeneratorConfig(**values)

    def module_path(self, *parts: str) -> str:
        return ".".join(filter(bool, [self.namespace, *parts]))
