"""
Тесты печати артефактов в код Python
"""

import pytest

from helpers import json_response, user_object
from sdk_generator.config import GeneratorConfig
from sdk_generator.internal.generator.engine import GenerationEngine
from sdk_generator.internal.printer.code_models import Function, Parameter
from sdk_generator.internal.printer.python_printer import (
    PythonPrinter,
    optional,
    relative_import,
)
from sdk_generator.internal.types.models import (
    ArraySchema,
    Endpoint,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
    Specification,
)


@pytest.fixture
def project(config, get_user, create_user, delete_user):
    specification = Specification(
        endpoints=[get_user, create_user, delete_user],
        schemas={
            "User": user_object(**{"user-id": PrimitiveSchema(kind="integer")}),
            "UserList": ArraySchema(items=ReferenceSchema(target_name="User")),
        },
    )
    artifacts = GenerationEngine(config).generate(specification)
    return PythonPrinter(config).print_project(artifacts)


def file_text(project, file_name):
    code_file = project.get_file(file_name)
    assert code_file is not None, file_name
    return str(code_file)


class TestProjectLayout:
    """Тесты структуры сгенерированного пакета"""

    def test_files(self, project):
        file_names = {code_file.file_name for code_file in project.files}

        assert file_names == {
            "__init__.py",
            "dto.py",
            "lib/__init__.py",
            "lib/request.py",
            "requests/__init__.py",
            "requests/users.py",
            "responses/__init__.py",
            "responses/users.py",
        }

    def test_config_file_written_with_url(self, get_user):
        config = GeneratorConfig(url="http://api.example.com/openapi.json", namespace="sdk")
        artifacts = GenerationEngine(config).generate(Specification(endpoints=[get_user]))
        project = PythonPrinter(config).print_project(artifacts)

        text = file_text(project, "sdk.toml")
        assert 'url = "http://api.example.com/openapi.json"' in text
        assert 'namespace = "sdk"' in text

    def test_main_init(self, project):
        text = file_text(project, "__init__.py")

        assert "from .lib.request import Request, UnexpectedStatusError" in text
        assert "from .requests.users import GetUserRequest" in text
        assert "from .requests.users import DeleteUserRequest" in text
        assert "'CreateUserRequest'" in text


class TestDtoPrinting:
    """Печать pydantic моделей"""

    def test_schema_dto(self, project):
        text = file_text(project, "dto.py")

        assert "from pydantic import BaseModel, ConfigDict, Field" in text
        assert "class User(BaseModel):" in text
        assert "    id: int\n" in text
        assert "    name: Optional[str] = None\n" in text
        assert "    model_config = ConfigDict(populate_by_name=True)" in text
        assert "    user_id: Optional[int] = Field(default=None, alias='user-id')" in text
        assert "UserList = List[User]" in text
        assert text.index("class User(") < text.index("UserList = ") < text.index(
            "User.model_rebuild()"
        )

    def test_response_dto(self, project):
        text = file_text(project, "responses/users.py")

        assert "class GetUser200Response(BaseModel):" in text
        assert "class CreateUser400Response(BaseModel):" in text
        assert "    message: Optional[str] = None" in text
        assert "model_config" not in text


class TestRequestPrinting:
    """Печать классов запросов"""

    def test_imports(self, project):
        text = file_text(project, "requests/users.py")

        assert "import httpx" in text
        assert "from ..lib.request import Request, UnexpectedStatusError" in text
        assert "from ..dto import User" in text
        assert "from ..responses.users import CreateUser400Response, GetUser200Response" in text

    def test_get_request(self, project):
        text = file_text(project, "requests/users.py")

        assert "class GetUserRequest(Request):" in text
        assert "    method = 'GET'" in text
        assert "        self.id = id" in text
        assert 'return f"/users/{self.id}"' in text
        assert "            case 200:\n" in text
        assert "return GetUser200Response.model_validate(response.json())" in text
        assert ") -> GetUser200Response:" in text

    def test_post_request(self, project):
        text = file_text(project, "requests/users.py")

        assert "class CreateUserRequest(Request):" in text
        assert "    has_body = True" in text
        assert "        email: Optional[str] = None," in text
        assert "    def default_body(self) -> Dict[str, Any]:" in text
        assert "                'name': self.name," in text
        assert "return User.model_validate(response.json())" in text
        assert ") -> Union[User, CreateUser400Response]:" in text
        assert 'return "/users"' in text

    def test_request_without_dto(self, project):
        """Запрос без DTO ответа не переопределяет create_dto_from_response"""
        text = file_text(project, "requests/users.py")
        delete_request = text[text.index("class DeleteUserRequest") :]

        assert "create_dto_from_response" not in delete_request.split("\nclass ")[0]

    def test_alias_dispatch_uses_type_adapter(self, config):
        specification = Specification(
            endpoints=[
                Endpoint(
                    name="ListUsers",
                    collection="users",
                    path_segments=["users"],
                    response={200: json_response(ReferenceSchema(target_name="UserList"))},
                )
            ],
            schemas={
                "User": user_object(),
                "UserList": ArraySchema(items=ReferenceSchema(target_name="User")),
            },
        )
        artifacts = GenerationEngine(config).generate(specification)
        text = file_text(PythonPrinter(config).print_project(artifacts), "requests/users.py")

        assert "from pydantic import TypeAdapter" in text
        assert "return TypeAdapter(UserList).validate_python(response.json())" in text

    def test_array_dispatch_uses_type_adapter(self, config):
        specification = Specification(
            endpoints=[
                Endpoint(
                    name="ListUsers",
                    collection="users",
                    path_segments=["users"],
                    response={
                        200: json_response(ArraySchema(items=ReferenceSchema(target_name="User"))),
                        404: json_response(ReferenceSchema(target_name="Error")),
                    },
                )
            ],
            schemas={
                "User": user_object(),
                "Error": ObjectSchema(properties={"message": PrimitiveSchema(kind="string")}),
            },
        )
        artifacts = GenerationEngine(config).generate(specification)
        text = file_text(PythonPrinter(config).print_project(artifacts), "requests/users.py")

        assert "from ..dto import Error, User" in text
        assert "            case 200:\n" in text
        assert "return TypeAdapter(List[User]).validate_python(response.json())" in text
        assert "return Error.model_validate(response.json())" in text
        assert ") -> Union[List[User], Error]:" in text

    def test_runtime_module(self, project):
        text = file_text(project, "lib/request.py")

        assert "class Request:" in text
        assert "class UnexpectedStatusError(Exception):" in text
        assert "def filter_unset(" in text


class TestCodeModels:
    """Тесты моделей кода"""

    def test_required_parameters_first(self):
        function = Function(
            name="__init__",
            parameters=[
                Parameter(name="self"),
                Parameter(name="limit", var_type="int", default="10"),
                Parameter(name="id", var_type="int"),
            ],
        )

        assert str(function) == (
            "def __init__(\n"
            "    self,\n"
            "    id: int,\n"
            "    limit: int = 10,\n"
            ") -> None:\n"
            "    pass"
        )

    def test_optional(self):
        assert optional("int") == "Optional[int]"
        assert optional("Any") == "Any"
        assert optional("Optional[int]") == "Optional[int]"

    def test_relative_import(self):
        assert relative_import("sdk.responses.users", "sdk.dto") == "..dto"
        assert relative_import("sdk.requests.users", "sdk.requests.orders") == ".orders"
        assert relative_import("sdk.__init__", "sdk.lib.request") == ".lib.request"

    def test_nested_object_in_printed_dto(self, config):
        specification = Specification(
            schemas={
                "Order": ObjectSchema(
                    properties={
                        "items": ArraySchema(
                            items=ObjectSchema(properties={"sku": PrimitiveSchema(kind="string")})
                        )
                    }
                )
            }
        )
        artifacts = GenerationEngine(config).generate(specification)
        text = file_text(PythonPrinter(config).print_project(artifacts), "dto.py")

        assert "class Items(BaseModel):" in text
        assert "    items: Optional[List[Items]] = None" in text
