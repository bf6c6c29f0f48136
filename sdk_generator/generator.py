"""
Главный модуль генератора - чистый интерфейс
"""

from typing import Any, Dict, List

from .config import GeneratorConfig
from .internal.generator.engine import GenerationEngine
from .internal.parser.openapi import OpenApiParser
from .internal.printer.python_printer import PythonPrinter
from .internal.printer.code_models import Project
from .internal.types.models import Artifact, Specification


class SdkGenerator:
    """Чистый интерфейс для генерации SDK"""

    def __init__(self, openapi_spec: Dict[str, Any], config: GeneratorConfig = None):
        self.config = config or GeneratorConfig()
        self.parser = OpenApiParser(openapi_spec)

    def specification(self) -> Specification:
        return self.parser.parse()

    def artifacts(self) -> List[Artifact]:
        """Артефакты DTO и запросов без печати кода"""
        return GenerationEngine(self.config).generate(self.specification())

    def generate(self) -> Project:
        """Генерация проекта SDK"""
        return PythonPrinter(self.config).print_project(self.artifacts())


def generate_artifacts(
    specification: Specification, config: GeneratorConfig = None
) -> List[Artifact]:
    """Генерация артефактов из уже разобранной спецификации"""
    return GenerationEngine(config).generate(specification)


def generate_sdk(openapi_spec: Dict[str, Any], config: GeneratorConfig = None) -> Project:
    """Создание SDK из OpenAPI спецификации"""
    return SdkGenerator(openapi_spec, config).generate()
