import logging
from typing import Dict, Iterable, Optional

from ..errors import UnresolvedReferenceError
from ..utils.naming import type_name
from .models import (
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaNode,
    TypeExpr,
)

logger = logging.getLogger(__name__)

# Таблица соответствия типов схемы типам Python
TYPE_MAPPING = {
    "integer": "int",
    "string": "str",
    "boolean": "bool",
    "array": "list",
    "object": "dict",
    "null": "None",
}

NUMBER_FORMATS = {
    "float": "float",
    "int32": "int",
    "int64": "int",
}

FALLBACK_TYPE = "Any"


class SchemaResolver:
    """Резолвер узлов схемы в выражения типов"""

    def __init__(self, schema_names: Iterable[str] = ()):
        self._schema_registry: Dict[str, str] = {}

        for name in schema_names:
            self.register_schema(name)

    def register_schema(self, original_name: str, clean_name: str = None) -> str:
        """Регистрация схемы, на которую можно ссылаться"""
        clean_name = clean_name or type_name(original_name)
        self._schema_registry[original_name] = clean_name
        return clean_name

    def resolve_schema_name(self, original_name: str) -> str:
        """Имя DTO зарегистрированной схемы"""
        if original_name not in self._schema_registry:
            raise UnresolvedReferenceError(original_name)

        return self._schema_registry[original_name]

    def resolve_reference(self, target_name: str) -> TypeExpr:
        """
        Имя DTO для ссылки.

        Разрешение идемпотентно и не идет дальше одного уровня:
        ссылка на ссылку дает имя непосредственной цели.
        """
        return TypeExpr.dto_reference(self.resolve_schema_name(target_name))

    def resolve(self, schema: Optional[SchemaNode]) -> TypeExpr:
        """Получение типа из узла схемы"""
        if isinstance(schema, ReferenceSchema):
            return self.resolve_reference(schema.target_name)

        if isinstance(schema, ObjectSchema):
            return TypeExpr.of("dict")

        if isinstance(schema, ArraySchema):
            # Массив ссылок типизируем сразу, inline элементы подставит DTO генератор
            if isinstance(schema.items, ReferenceSchema):
                return TypeExpr.list_of(self.resolve_reference(schema.items.target_name))

            return TypeExpr.of("list")

        if isinstance(schema, PrimitiveSchema):
            if isinstance(schema.kind, list):
                return TypeExpr.union(
                    [self._map_type(kind, schema.format) for kind in schema.kind]
                )

            return self._map_type(schema.kind, schema.format)

        logger.debug("Неизвестный узел схемы %r, используется %s", schema, FALLBACK_TYPE)
        return TypeExpr.of(FALLBACK_TYPE)

    @staticmethod
    def _map_type(kind: Optional[str], format: Optional[str] = None) -> TypeExpr:
        if kind == "number":
            if format in NUMBER_FORMATS:
                return TypeExpr.of(NUMBER_FORMATS[format])

            # Формат не уточнен - допускаем и целые, и дробные
            return TypeExpr.union([TypeExpr.of("int"), TypeExpr.of("float")])

        if kind not in TYPE_MAPPING:
            logger.debug("Тип схемы %r не поддерживается, используется %s", kind, FALLBACK_TYPE)
            return TypeExpr.of(FALLBACK_TYPE)

        return TypeExpr.of(TYPE_MAPPING[kind])

    @staticmethod
    def inline_object(schema: Optional[SchemaNode]) -> Optional[ObjectSchema]:
        """
        Inline объект, для которого нужен вложенный DTO.

        Для объекта со свойствами возвращает сам объект, для массива
        таких объектов - схему элемента. Иначе None.
        """
        if isinstance(schema, ObjectSchema) and schema.properties:
            return schema

        if (
            isinstance(schema, ArraySchema)
            and isinstance(schema.items, ObjectSchema)
            and schema.items.properties
        ):
            return schema.items

        return None
