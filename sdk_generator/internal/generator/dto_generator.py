import logging
import textwrap
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from ...config import GeneratorConfig
from ..errors import GenerationError, UnresolvedReferenceError
from ..types.models import (
    ArraySchema,
    DtoArtifact,
    DtoField,
    Endpoint,
    ObjectSchema,
    ReferenceSchema,
    ResponseSpec,
    SchemaNode,
    TypeExpr,
)
from ..types.schema_resolver import SchemaResolver
from ..utils.naming import (
    dto_class_name,
    is_blank_name,
    module_name,
    resource_group_name,
    response_class_name,
    unique_name,
    variable_name,
)
from .context import GenerationContext

logger = logging.getLogger(__name__)

NO_CONTENT_STATUSES = {204}
DEFAULT_COLLECTION = "Default"


def wrap_long_lines(text: Optional[str], width: int = 100) -> str:
    if not text:
        return ""

    return "\n".join(
        textwrap.fill(line, width=width) if line.strip() else ""
        for line in text.strip().splitlines()
    )


def select_response_schema(
    response: ResponseSpec, preferred_media_types: Sequence[str] = ()
) -> Optional[SchemaNode]:
    """
    Схема ответа для генерации.

    Берется первый предпочтительный media type, иначе первый объявленный.
    Остальные media types игнорируются.
    """
    if not response.content:
        return None

    for media_type in preferred_media_types:
        if media_type in response.content:
            return response.content[media_type]

    return next(iter(response.content.values()))


class DtoGenerator:
    """Генератор DTO для тел ответов и именованных схем"""

    def __init__(self, config: GeneratorConfig, resolver: SchemaResolver):
        self.config = config
        self.resolver = resolver

    def generate_response_dtos(
        self, endpoint: Endpoint, context: GenerationContext
    ) -> Dict[int, str]:
        """DTO для всех ответов эндпоинта: статус -> имя DTO"""
        names = {}

        for status, response in endpoint.response.items():
            schema = select_response_schema(response, self.config.preferred_media_types)
            artifact = self.emit_response_dto(endpoint, status, schema, context)

            if artifact is not None:
                names[status] = artifact.type_name

        return names

    def emit_response_dto(
        self,
        endpoint: Endpoint,
        status: int,
        schema: Optional[SchemaNode],
        context: GenerationContext,
    ) -> Optional[DtoArtifact]:
        if status in NO_CONTENT_STATUSES:
            return None

        # Ссылки верхнего уровня не разворачиваются в отдельный DTO ответа
        if isinstance(schema, ReferenceSchema):
            return None

        if not isinstance(schema, ObjectSchema) or not schema.properties:
            logger.debug(
                "%s %s: тело ответа не описывает объект, DTO не создается",
                endpoint.name,
                status,
            )
            return None

        collection = resource_group_name(endpoint.collection or DEFAULT_COLLECTION)
        namespace = self.config.module_path(
            self.config.response_namespace_suffix, module_name(collection)
        )

        dto_name = context.claim(response_class_name(endpoint.name, status))

        try:
            fields = self._build_fields(schema, collection, namespace, context)
        except UnresolvedReferenceError as e:
            raise GenerationError(str(e), endpoint=endpoint.name, status=status) from e

        return context.add_dto(
            DtoArtifact(
                type_name=dto_name,
                collection_group=collection,
                namespace=namespace,
                fields=fields,
                doc_title=schema.title or "",
                doc_description=wrap_long_lines(schema.description),
                source="response",
            )
        )

    def emit_schema_dto(
        self, schema_name: str, schema: SchemaNode, context: GenerationContext
    ) -> DtoArtifact:
        """DTO для именованной схемы спецификации"""
        collection = resource_group_name(self.config.dto_namespace_suffix)
        namespace = self.config.module_path(self.config.dto_namespace_suffix)
        dto_name = self.resolver.resolve_schema_name(schema_name)

        try:
            if isinstance(schema, ObjectSchema) and schema.properties:
                fields = self._build_fields(schema, collection, namespace, context)
                alias_of = None
            else:
                fields = []
                alias_of = self._resolve_alias(schema_name, schema, collection, namespace, context)
        except UnresolvedReferenceError as e:
            raise GenerationError(str(e), schema=schema_name) from e

        return context.add_dto(
            DtoArtifact(
                type_name=dto_name,
                collection_group=collection,
                namespace=namespace,
                fields=fields,
                doc_title=getattr(schema, "title", None) or schema_name,
                doc_description=wrap_long_lines(getattr(schema, "description", None)),
                source="schema",
                alias_of=alias_of,
            )
        )

    def _resolve_alias(
        self,
        schema_name: str,
        schema: SchemaNode,
        collection: str,
        namespace: str,
        context: GenerationContext,
    ) -> TypeExpr:
        nested = self.resolver.inline_object(schema)
        if nested is None:
            return self.resolver.resolve(schema)

        item = self._emit_nested_dto(f"{schema_name}Item", nested, collection, namespace, context)
        return TypeExpr.list_of(TypeExpr.dto_reference(item.type_name))

    def _build_fields(
        self,
        schema: ObjectSchema,
        collection: str,
        namespace: str,
        context: GenerationContext,
    ) -> List[DtoField]:
        fields = []
        used_names = set()  # Для дедупликации имен

        for property_name, property_schema in schema.properties.items():
            if is_blank_name(property_name):
                logger.debug("Пропущено свойство с пустым именем")
                continue

            field_type = self.resolver.resolve(property_schema)

            # Маркер dict/list заменяется именем вложенного DTO
            nested = self.resolver.inline_object(property_schema) if field_type.is_marker else None
            if nested is not None:
                nested_dto = self._emit_nested_dto(
                    property_name, nested, collection, namespace, context
                )
                field_type = TypeExpr.dto_reference(nested_dto.type_name)

                if isinstance(property_schema, ArraySchema):
                    field_type = TypeExpr.list_of(field_type)

            clean_name = variable_name(property_name)
            if hasattr(BaseModel, clean_name):
                # Имя перекрывает атрибут BaseModel
                clean_name = f"{clean_name}_field"

            clean_name = unique_name(clean_name, used_names, separator="_")
            used_names.add(clean_name)

            fields.append(
                DtoField(
                    original_name=property_name,
                    normalized_name=clean_name,
                    type=field_type,
                    nullable=property_name not in schema.required,
                    description=getattr(property_schema, "description", None),
                )
            )

        return fields

    def _emit_nested_dto(
        self,
        property_name: str,
        schema: ObjectSchema,
        collection: str,
        namespace: str,
        context: GenerationContext,
    ) -> DtoArtifact:
        """
        Вложенный DTO для inline объекта, с проверкой кэша по имени.

        Переиспользуется только DTO того же модуля: импорты между модулями
        ответов могли бы замкнуться в цикл.
        """
        fields = self._build_fields(schema, collection, namespace, context)

        candidate = dto_class_name(property_name)
        dto_name = candidate
        counter = 1

        while context.is_claimed(dto_name):
            existing = context.generated.get(dto_name)
            if (
                existing is not None
                and existing.source == "nested"
                and existing.namespace == namespace
                and existing.fields == fields
            ):
                logger.debug("DTO %s уже сгенерирован, переиспользуется", dto_name)
                return existing

            counter += 1
            dto_name = f"{candidate}{counter}"

        context.claim(dto_name)

        return context.add_dto(
            DtoArtifact(
                type_name=dto_name,
                collection_group=collection,
                namespace=namespace,
                fields=fields,
                doc_title=schema.title or "",
                doc_description=wrap_long_lines(schema.description),
                source="nested",
            )
        )
