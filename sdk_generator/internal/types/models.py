from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class TypeExpr(BaseModel):
    """Выражение типа целевого языка: int, Union[int, float], List[User]"""

    model_config = ConfigDict(frozen=True)

    value: list[Union["TypeExpr", str]] = []
    wrap_name: Optional[str] = None

    # Атом является именем сгенерированного DTO
    dto: bool = False

    @field_validator("value", mode="before")
    def value_check(cls, value):
        if not isinstance(value, (list, tuple)):
            return [value]

        return list(value)

    def __str__(self):
        _value = ", ".join([_.__str__() for _ in self.value])

        if self.wrap_name is None:
            return _value

        return f"{self.wrap_name}[{_value}]" if _value else "Any"

    @classmethod
    def of(cls, name: str) -> "TypeExpr":
        return cls(value=name)

    @classmethod
    def dto_reference(cls, name: str) -> "TypeExpr":
        return cls(value=name, dto=True)

    @classmethod
    def union(cls, members: List["TypeExpr"]) -> "TypeExpr":
        if len(members) == 1:
            return members[0]

        return cls(value=members, wrap_name="Union")

    @classmethod
    def list_of(cls, item: "TypeExpr") -> "TypeExpr":
        return cls(value=item, wrap_name="List")

    def atoms(self):
        for _ in self.value:
            if isinstance(_, TypeExpr):
                yield from _.atoms()
            else:
                yield _, self.dto

    def dto_names(self) -> List[str]:
        """Имена DTO, на которые ссылается выражение, в порядке появления"""
        names = []
        for atom, is_dto in self.atoms():
            if is_dto and atom not in names:
                names.append(atom)

        return names

    @property
    def is_marker(self) -> bool:
        """Обобщенный тип-маркер для inline объектов и массивов"""
        return self.wrap_name is None and self.value in (["dict"], ["list"])


TypeExpr.model_rebuild()


# Узлы схемы - размеченное объединение по полю node


class PrimitiveSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["primitive"] = "primitive"
    kind: Union[str, list[str], None] = None
    format: Optional[str] = None


class ObjectSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["object"] = "object"
    title: Optional[str] = None
    description: Optional[str] = None
    properties: Dict[str, "SchemaNode"] = {}
    required: list[str] = []


class ArraySchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: Literal["array"] = "array"
    items: Optional["SchemaNode"] = None


class ReferenceSchema(BaseModel):
    """Именованный указатель на схему, объявленную в другом месте"""

    model_config = ConfigDict(frozen=True)

    node: Literal["reference"] = "reference"
    target_name: str


SchemaNode = Annotated[
    Union[PrimitiveSchema, ObjectSchema, ArraySchema, ReferenceSchema],
    Field(discriminator="node"),
]

ObjectSchema.model_rebuild()
ArraySchema.model_rebuild()


class Parameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value_schema: SchemaNode = PrimitiveSchema()
    required: bool = False
    default: Any = None
    description: Optional[str] = None


class ResponseSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    content: Dict[str, SchemaNode] = {}


class Endpoint(BaseModel):
    """Одна операция API: метод, путь, параметры и возможные ответы"""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    method: HttpMethod = HttpMethod.GET
    collection: Optional[str] = None

    path_segments: list[str] = []
    path_parameters: list[Parameter] = []
    body_parameters: list[Parameter] = []
    query_parameters: list[Parameter] = []
    header_parameters: list[Parameter] = []

    # Порядок вставки = порядок объявления статусов
    response: Dict[int, ResponseSpec] = {}


class Specification(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoints: list[Endpoint] = []
    schemas: Dict[str, SchemaNode] = {}


# Сгенерированные артефакты


class DtoField(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_name: str
    normalized_name: str
    type: TypeExpr
    nullable: bool = True
    description: Optional[str] = None

    @property
    def maps_name(self) -> bool:
        return self.original_name != self.normalized_name


class DtoArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["dto"] = "dto"
    type_name: str
    collection_group: str
    namespace: str
    fields: list[DtoField] = []
    doc_title: str = ""
    doc_description: str = ""
    source: Literal["response", "nested", "schema"] = "response"

    # Именованная схема без свойств печатается как псевдоним типа
    alias_of: Optional[TypeExpr] = None

    @property
    def name_mappings(self) -> Dict[str, str]:
        """normalized_name -> имя поля на проводе"""
        return {
            field.normalized_name: field.original_name
            for field in self.fields
            if field.maps_name
        }


class RequestParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_name: str
    normalized_name: str
    type: TypeExpr
    required: bool = False
    default: Any = None
    description: Optional[str] = None
    location: Literal["path", "body", "query", "header"]

    @property
    def maps_name(self) -> bool:
        return self.original_name != self.normalized_name


class ParameterGroups(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: list[RequestParameter] = []
    body: list[RequestParameter] = []
    query: list[RequestParameter] = []
    header: list[RequestParameter] = []

    def ordered(self) -> list[RequestParameter]:
        """Порядок параметров конструктора: path, body, query, header"""
        return self.path + self.body + self.query + self.header


class Accessor(BaseModel):
    """Метод, возвращающий только не-None значения группы"""

    model_config = ConfigDict(frozen=True)

    name: str
    group: Literal["body", "query", "header"]


class DispatchEntry(BaseModel):
    """Статус ответа и тип, в который разбирается его тело"""

    model_config = ConfigDict(frozen=True)

    status: int
    type: TypeExpr

    @property
    def dto_type_name(self) -> str:
        return str(self.type)

    @property
    def is_model(self) -> bool:
        """Тело разбирается через model_validate одного DTO"""
        return self.type.wrap_name is None and self.type.dto and len(self.type.value) == 1


class RequestArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["request"] = "request"
    type_name: str
    resource_group: str
    namespace: str
    http_method: HttpMethod
    path_template: str
    parameter_groups: ParameterGroups = ParameterGroups()
    accessors: list[Accessor] = []
    response_dispatch: list[DispatchEntry] = []
    return_types: list[str] = []
    has_body: bool = False
    doc_title: str = ""
    doc_description: str = ""

    @property
    def creates_dto(self) -> bool:
        return bool(self.response_dispatch)


Artifact = Union[DtoArtifact, RequestArtifact]
