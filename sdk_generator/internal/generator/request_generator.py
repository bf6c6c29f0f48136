import logging
from typing import Dict, List, Optional, Sequence, Set

from ...config import GeneratorConfig
from ..errors import GenerationError, UnresolvedReferenceError
from ..types.models import (
    Accessor,
    DispatchEntry,
    Endpoint,
    Parameter,
    ParameterGroups,
    ReferenceSchema,
    RequestArtifact,
    RequestParameter,
    SchemaNode,
    TypeExpr,
)
from ..types.schema_resolver import SchemaResolver
from ..utils.naming import (
    module_name,
    request_class_name,
    resource_group_name,
    response_class_name,
    unique_name,
    variable_name,
)
from .context import GenerationContext
from .dto_generator import NO_CONTENT_STATUSES, select_response_schema, wrap_long_lines

logger = logging.getLogger(__name__)

PATH_PARAMETER_MARKER = ":"

# Группы с методом-аксессором только не-None значений
ACCESSOR_NAMES = {
    "body": "default_body",
    "query": "default_query",
    "header": "default_headers",
}

# Атрибуты базового класса запроса, которые нельзя перекрывать параметрами
RESERVED_ATTRIBUTES = {
    "self",
    "method",
    "has_body",
    "build",
    "send",
    "send_async",
    "filter_unset",
    "resolve_endpoint",
    "create_dto_from_response",
    *ACCESSOR_NAMES.values(),
}


def is_path_parameter_segment(segment: str) -> bool:
    return segment.startswith(PATH_PARAMETER_MARKER)


class RequestGenerator:
    """Генератор классов запросов по эндпоинтам"""

    def __init__(self, config: GeneratorConfig, resolver: SchemaResolver):
        self.config = config
        self.resolver = resolver

    def emit_request(
        self,
        endpoint: Endpoint,
        response_names: Optional[Dict[int, str]] = None,
        context: Optional[GenerationContext] = None,
    ) -> RequestArtifact:
        """
        Артефакт запроса для эндпоинта.

        Args:
            endpoint: Эндпоинт спецификации
            response_names: Имена DTO, созданных для ответов эндпоинта
                (статус -> имя). Если не переданы, статусы с телом-объектом
                получают синтетическое имя {Endpoint}{status}Response.
                Тела без DTO разбираются по своему типу: List[User], str.
            context: Контекст запуска для уникальности имен типов
        """
        resource_name = resource_group_name(
            endpoint.collection or self.config.fallback_resource_name
        )

        try:
            groups = self._build_parameter_groups(endpoint)
            dispatch = self._build_dispatch(endpoint, response_names)
        except UnresolvedReferenceError as e:
            raise GenerationError(str(e), endpoint=endpoint.name) from e

        path_variables = {
            parameter.original_name: parameter.normalized_name
            for parameter in groups.path
        }

        accessors = [
            Accessor(name=accessor_name, group=group)
            for group, accessor_name in ACCESSOR_NAMES.items()
            if getattr(groups, group)
        ]

        # Union типов ответа без повторов, в порядке первого появления
        return_types = []
        for entry in dispatch:
            if entry.dto_type_name not in return_types:
                return_types.append(entry.dto_type_name)

        class_name = request_class_name(endpoint.name)
        if context is not None:
            class_name = context.claim(class_name)

        return RequestArtifact(
            type_name=class_name,
            resource_group=resource_name,
            namespace=self.config.module_path(
                self.config.request_namespace_suffix, module_name(resource_name)
            ),
            http_method=endpoint.method,
            path_template=self.build_path_template(endpoint.path_segments, path_variables),
            parameter_groups=groups,
            accessors=accessors,
            response_dispatch=dispatch,
            return_types=return_types,
            has_body=endpoint.method.value in self.config.body_methods,
            doc_title=endpoint.name,
            doc_description=wrap_long_lines(endpoint.description),
        )

    @staticmethod
    def build_path_template(
        path_segments: Sequence[str], path_variables: Dict[str, str] = None
    ) -> str:
        """
        Шаблон пути с подстановками.

        Examples:
            >>> RequestGenerator.build_path_template(["users", ":id"])
            '/users/{id}'
        """
        path_variables = path_variables or {}
        segments = []

        for segment in path_segments:
            if is_path_parameter_segment(segment):
                name = segment[len(PATH_PARAMETER_MARKER):]
                segments.append("{" + path_variables.get(name, variable_name(name)) + "}")
            else:
                segments.append(segment)

        return "/" + "/".join(segments)

    def _build_parameter_groups(self, endpoint: Endpoint) -> ParameterGroups:
        used_names: Set[str] = set(RESERVED_ATTRIBUTES)

        # Приоритет: path, body, query, header - определяет порядок в конструкторе
        return ParameterGroups(
            path=self._build_group(endpoint.path_parameters, "path", (), used_names),
            body=self._build_group(
                endpoint.body_parameters, "body", self.config.ignored_body_params, used_names
            ),
            query=self._build_group(
                endpoint.query_parameters, "query", self.config.ignored_query_params, used_names
            ),
            header=self._build_group(
                endpoint.header_parameters,
                "header",
                self.config.ignored_header_params,
                used_names,
            ),
        )

    def _build_group(
        self,
        parameters: Sequence[Parameter],
        location: str,
        ignored: Sequence[str],
        used_names: Set[str],
    ) -> List[RequestParameter]:
        result = []

        for parameter in parameters:
            if parameter.name in ignored:
                logger.debug("Параметр %s (%s) в списке игнорируемых", parameter.name, location)
                continue

            clean_name = variable_name(parameter.name)

            # Совпадение с параметром другой группы: id -> id_query
            if clean_name in used_names:
                clean_name = unique_name(f"{clean_name}_{location}", used_names, separator="_")
            used_names.add(clean_name)

            result.append(
                RequestParameter(
                    original_name=parameter.name,
                    normalized_name=clean_name,
                    type=self.resolver.resolve(parameter.value_schema),
                    required=parameter.required,
                    default=parameter.default,
                    description=parameter.description,
                    location=location,
                )
            )

        return result

    def _build_dispatch(
        self, endpoint: Endpoint, response_names: Optional[Dict[int, str]]
    ) -> List[DispatchEntry]:
        dispatch = []

        for status, response in endpoint.response.items():
            if status in NO_CONTENT_STATUSES:
                continue

            schema = select_response_schema(response, self.config.preferred_media_types)
            if schema is None:
                logger.debug(
                    "%s %s: ответ без тела, статус не попадает в dispatch",
                    endpoint.name,
                    status,
                )
                continue

            try:
                response_type = self._response_type(endpoint, status, schema, response_names)
            except UnresolvedReferenceError as e:
                raise GenerationError(str(e), endpoint=endpoint.name, status=status) from e

            dispatch.append(DispatchEntry(status=status, type=response_type))

        return dispatch

    def _response_type(
        self,
        endpoint: Endpoint,
        status: int,
        schema: SchemaNode,
        response_names: Optional[Dict[int, str]],
    ) -> TypeExpr:
        # Ссылка текущего ответа, а не оставшаяся от предыдущего статуса
        if isinstance(schema, ReferenceSchema):
            return self.resolver.resolve_reference(schema.target_name)

        if response_names is not None:
            if status in response_names:
                return TypeExpr.dto_reference(response_names[status])
        elif self.resolver.inline_object(schema) is schema:
            return TypeExpr.dto_reference(response_class_name(endpoint.name, status))

        # Массивы, примитивы и объекты без свойств: List[User], str, dict
        return self.resolver.resolve(schema)
