import json
import logging
from typing import Any, Dict, List, Optional

import jsonref

from ..errors import SpecificationError
from ..types.models import (
    ArraySchema,
    Endpoint,
    HttpMethod,
    ObjectSchema,
    Parameter,
    PrimitiveSchema,
    ReferenceSchema,
    ResponseSpec,
    SchemaNode,
    Specification,
)

logger = logging.getLogger(__name__)

PARAMETER_LOCATIONS = ("path", "query", "header")
PREFERRED_BODY_MEDIA_TYPES = ("application/json", "multipart/form-data")


def is_reference(node: Any) -> bool:
    # type() а не isinstance: прокси jsonref выдает себя за целевой объект
    return type(node) is jsonref.JsonRef


def reference_name(node: jsonref.JsonRef) -> str:
    """#/components/schemas/User -> User"""
    return node.__reference__["$ref"].rsplit("/", 1)[-1]


class OpenApiParser:
    """Парсер OpenAPI спецификации в модель Specification"""

    def __init__(self, openapi_dict: Dict[str, Any]):
        self.openapi_dict = openapi_dict

    def parse(self) -> Specification:
        """Парсинг OpenAPI в Specification"""
        if not isinstance(self.openapi_dict, dict) or "paths" not in self.openapi_dict:
            raise SpecificationError("В спецификации нет секции paths")

        # Ленивые прокси: ссылки на схемы остаются узнаваемыми,
        # ссылки на параметры и ответы разрешаются при обращении
        document = jsonref.loads(json.dumps(self.openapi_dict))

        try:
            schemas = {
                name: self._parse_schema(schema)
                for name, schema in document.get("components", {})
                .get("schemas", {})
                .items()
            }
            endpoints = self._parse_endpoints(document.get("paths", {}))
        except jsonref.JsonRefError as e:
            raise SpecificationError(f"Не удалось разрешить ссылку: {e}") from e

        return Specification(endpoints=endpoints, schemas=schemas)

    def _parse_endpoints(self, paths: Dict[str, Any]) -> List[Endpoint]:
        endpoints = []

        for path, path_spec in paths.items():
            shared_parameters = path_spec.get("parameters", [])

            for method, method_spec in path_spec.items():
                if method.upper() not in HttpMethod.__members__:
                    continue

                endpoints.append(
                    self._parse_endpoint(path, method, method_spec, shared_parameters)
                )

        return endpoints

    def _parse_endpoint(
        self, path: str, method: str, spec: Dict, shared_parameters: List
    ) -> Endpoint:
        # Параметры операции перекрывают параметры пути с тем же name/in
        merged = {}
        for param_spec in [*shared_parameters, *spec.get("parameters", [])]:
            merged[(param_spec.get("name"), param_spec.get("in"))] = param_spec

        grouped: Dict[str, List[Parameter]] = {location: [] for location in PARAMETER_LOCATIONS}
        for (name, location), param_spec in merged.items():
            if location not in grouped:
                logger.debug("Параметр %s (%s) не поддерживается", name, location)
                continue

            grouped[location].append(
                Parameter(
                    name=name,
                    value_schema=self._parse_schema(param_spec.get("schema")),
                    required=bool(param_spec.get("required", location == "path")),
                    default=self._default_value(param_spec.get("schema")),
                    description=param_spec.get("description"),
                )
            )

        tags = spec.get("tags") or []

        return Endpoint(
            name=spec.get("operationId") or f"{method} {path}",
            description=spec.get("description") or spec.get("summary"),
            method=HttpMethod(method.upper()),
            collection=tags[0] if tags else None,
            path_segments=self._path_segments(path),
            path_parameters=grouped["path"],
            body_parameters=self._parse_body_parameters(spec.get("requestBody")),
            query_parameters=grouped["query"],
            header_parameters=grouped["header"],
            response=self._parse_responses(spec.get("responses", {})),
        )

    @staticmethod
    def _path_segments(path: str) -> List[str]:
        """/users/{id} -> ["users", ":id"]"""
        segments = []
        for segment in path.strip("/").split("/"):
            if not segment:
                continue

            if segment.startswith("{") and segment.endswith("}"):
                segment = ":" + segment[1:-1]

            segments.append(segment)

        return segments

    def _parse_body_parameters(self, request_body: Optional[Dict]) -> List[Parameter]:
        if not request_body:
            return []

        content = request_body.get("content", {})
        media_type = next(
            (m for m in PREFERRED_BODY_MEDIA_TYPES if m in content),
            next(iter(content), None),
        )
        if media_type is None:
            return []

        schema = content[media_type].get("schema")
        if schema is None:
            return []

        properties = schema.get("properties", {})
        if not properties:
            # Тело целиком одним параметром
            return [
                Parameter(
                    name="body",
                    value_schema=self._parse_schema(schema),
                    required=bool(request_body.get("required", False)),
                )
            ]

        required = schema.get("required", [])

        return [
            Parameter(
                name=name,
                value_schema=self._parse_schema(property_spec),
                required=name in required,
                default=self._default_value(property_spec),
                description=self._description(property_spec),
            )
            for name, property_spec in properties.items()
        ]

    def _parse_responses(self, responses: Dict[str, Any]) -> Dict[int, ResponseSpec]:
        result = {}

        for status, response_spec in responses.items():
            try:
                status_code = int(status)
            except ValueError:
                logger.debug("Статус ответа %s пропущен", status)
                continue

            content = {
                media_type: self._parse_schema(media_spec.get("schema"))
                for media_type, media_spec in response_spec.get("content", {}).items()
                if media_spec.get("schema") is not None
            }

            result[status_code] = ResponseSpec(
                description=response_spec.get("description"), content=content
            )

        return result

    def _parse_schema(self, schema: Any) -> SchemaNode:
        """Преобразование схемы OpenAPI в узел схемы"""
        if is_reference(schema):
            return ReferenceSchema(target_name=reference_name(schema))

        if not isinstance(schema, dict):
            # true/false/None - любой тип
            return PrimitiveSchema()

        # allOf с единственной ссылкой - частый способ добавить description к $ref
        all_of = schema.get("allOf") or []
        if len(all_of) == 1:
            return self._parse_schema(all_of[0])

        variants = schema.get("anyOf") or schema.get("oneOf") or []
        if variants:
            kinds = [
                variant.get("type")
                for variant in variants
                if not is_reference(variant) and isinstance(variant, dict)
            ]
            if len(kinds) == len(variants) and all(
                kind not in (None, "object", "array") and isinstance(kind, str)
                for kind in kinds
            ):
                return PrimitiveSchema(kind=kinds)

            logger.debug("Составная схема anyOf/oneOf не поддерживается: %s", schema)
            return PrimitiveSchema()

        schema_type = schema.get("type")

        if schema_type == "object" or "properties" in schema:
            return ObjectSchema(
                title=schema.get("title"),
                description=schema.get("description"),
                properties={
                    name: self._parse_schema(property_spec)
                    for name, property_spec in schema.get("properties", {}).items()
                },
                required=list(schema.get("required", [])),
            )

        if schema_type == "array":
            items = schema.get("items")
            return ArraySchema(items=self._parse_schema(items) if items is not None else None)

        if isinstance(schema_type, list):
            return PrimitiveSchema(kind=list(schema_type), format=schema.get("format"))

        return PrimitiveSchema(kind=schema_type, format=schema.get("format"))

    @staticmethod
    def _default_value(schema: Any) -> Any:
        if is_reference(schema) or not isinstance(schema, dict):
            return None

        return schema.get("default")

    @staticmethod
    def _description(schema: Any) -> Optional[str]:
        if is_reference(schema) or not isinstance(schema, dict):
            return None

        return schema.get("description")
