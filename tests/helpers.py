"""
Построители схем для тестов
"""

from sdk_generator.internal.types.models import ObjectSchema, PrimitiveSchema, ResponseSpec


def json_response(schema) -> ResponseSpec:
    return ResponseSpec(content={"application/json": schema})


def user_object(**extra) -> ObjectSchema:
    properties = {
        "id": PrimitiveSchema(kind="integer"),
        "name": PrimitiveSchema(kind="string"),
    }
    properties.update(extra)
    return ObjectSchema(properties=properties, required=["id"])
