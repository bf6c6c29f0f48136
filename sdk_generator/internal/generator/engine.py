import logging
from typing import List

from ...config import GeneratorConfig
from ..types.models import Artifact, RequestArtifact, Specification
from ..types.schema_resolver import SchemaResolver
from ..utils.naming import type_name
from .context import GenerationContext
from .dto_generator import DtoGenerator
from .request_generator import RequestGenerator

logger = logging.getLogger(__name__)


class GenerationEngine:
    """Оркестрация генерации DTO и запросов по всей спецификации"""

    def __init__(self, config: GeneratorConfig = None):
        self.config = config or GeneratorConfig()

    def generate(self, specification: Specification) -> List[Artifact]:
        """
        Один проход по спецификации.

        Для каждого эндпоинта сначала создаются DTO ответов, затем артефакт
        запроса. Возвращает все DTO в порядке создания, затем все запросы
        в порядке эндпоинтов. Повторный вызов с той же спецификацией дает
        тот же результат: кэш живет только внутри вызова.
        """
        context = GenerationContext()
        resolver = SchemaResolver()

        # Имена именованных схем резервируются первыми, ссылки на них стабильны
        for schema_name in specification.schemas:
            resolver.register_schema(schema_name, context.claim(type_name(schema_name)))

        dto_generator = DtoGenerator(self.config, resolver)
        request_generator = RequestGenerator(self.config, resolver)

        if self.config.generate_component_dtos:
            for schema_name, schema in specification.schemas.items():
                dto_generator.emit_schema_dto(schema_name, schema, context)

        requests: List[RequestArtifact] = []

        for endpoint in specification.endpoints:
            response_names = dto_generator.generate_response_dtos(endpoint, context)
            requests.append(
                request_generator.emit_request(endpoint, response_names, context)
            )

        logger.debug(
            "Сгенерировано %s DTO и %s запросов", len(context.dtos), len(requests)
        )

        return [*context.dtos, *requests]
