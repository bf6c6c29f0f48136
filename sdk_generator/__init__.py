"""Генератор типизированных SDK из OpenAPI спецификаций"""

from .config import GeneratorConfig
from .generator import SdkGenerator, generate_artifacts, generate_sdk

__all__ = [
    "GeneratorConfig",
    "SdkGenerator",
    "generate_artifacts",
    "generate_sdk",
]
