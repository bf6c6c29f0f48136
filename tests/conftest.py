import pytest

from helpers import json_response, user_object
from sdk_generator.config import GeneratorConfig
from sdk_generator.internal.generator.context import GenerationContext
from sdk_generator.internal.types.models import (
    Endpoint,
    HttpMethod,
    ObjectSchema,
    Parameter,
    PrimitiveSchema,
    ReferenceSchema,
    ResponseSpec,
)
from sdk_generator.internal.types.schema_resolver import SchemaResolver


@pytest.fixture
def config():
    return GeneratorConfig(namespace="sdk")


@pytest.fixture
def context():
    return GenerationContext()


@pytest.fixture
def resolver():
    return SchemaResolver(["User", "Error"])


@pytest.fixture
def get_user():
    """GET /users/:id, 200 - inline объект пользователя"""
    return Endpoint(
        name="GetUser",
        method=HttpMethod.GET,
        collection="users",
        path_segments=["users", ":id"],
        path_parameters=[
            Parameter(name="id", value_schema=PrimitiveSchema(kind="integer"), required=True)
        ],
        response={200: json_response(user_object())},
    )


@pytest.fixture
def create_user():
    """POST /users: тело из name и email, 201 - ссылка на User, 400 - inline ошибка"""
    return Endpoint(
        name="CreateUser",
        method=HttpMethod.POST,
        collection="users",
        path_segments=["users"],
        body_parameters=[
            Parameter(name="name", value_schema=PrimitiveSchema(kind="string"), required=True),
            Parameter(name="email", value_schema=PrimitiveSchema(kind="string")),
        ],
        response={
            201: json_response(ReferenceSchema(target_name="User")),
            400: json_response(
                ObjectSchema(properties={"message": PrimitiveSchema(kind="string")})
            ),
        },
    )


@pytest.fixture
def delete_user():
    """DELETE /users/:id, только 204"""
    return Endpoint(
        name="DeleteUser",
        method=HttpMethod.DELETE,
        collection="users",
        path_segments=["users", ":id"],
        path_parameters=[
            Parameter(name="id", value_schema=PrimitiveSchema(kind="integer"), required=True)
        ],
        response={204: ResponseSpec(description="Deleted")},
    )
