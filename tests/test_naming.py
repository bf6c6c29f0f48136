"""
Тесты нормализации имен
"""

import pytest

from sdk_generator.internal.utils.naming import (
    normalize_identifier,
    request_class_name,
    resource_group_name,
    response_class_name,
    snake_case,
    type_name,
    unique_name,
)


class TestIdentifiers:
    """Имена переменных и полей"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("user-id", "user_id"),
            ("userId", "user_id"),
            ("HTTPValidationError", "http_validation_error"),
            ("  spaced name ", "spaced_name"),
            ("class", "class_field"),
            ("1st", "param_1st"),
            ("", "param"),
            ("---", "param"),
        ],
    )
    def test_normalize_identifier(self, raw, expected):
        assert normalize_identifier(raw) == expected

    def test_normalize_is_stable(self):
        """Нормализация нормализованного имени ничего не меняет"""
        for raw in ["user-id", "class", "1st", "X-Request-ID"]:
            once = normalize_identifier(raw)
            assert normalize_identifier(once) == once

    def test_snake_case(self):
        assert snake_case("X-Request-ID") == "x_request_id"


class TestTypeNames:
    """Имена типов"""

    def test_type_name_is_pure(self):
        """Одно базовое имя всегда дает одно имя типа"""
        assert type_name("user") == type_name("user") == "User"

    def test_type_name_cases(self):
        assert type_name("user_profile") == "UserProfile"
        assert type_name("user-profile") == "UserProfile"
        assert type_name("getUser") == "GetUser"

    def test_type_name_reserved(self):
        """Имена, перекрывающие импорты, получают суффикс"""
        assert type_name("List") == "ListModel"
        assert type_name("Request") == "RequestModel"
        assert type_name("") == "Model"
        assert type_name("404") == "Model404"

    def test_response_class_name(self):
        assert response_class_name("GetUser", 200) == "GetUser200Response"
        assert response_class_name("getUser", 404) == "GetUser404Response"

    def test_request_class_name(self):
        assert request_class_name("GetUser") == "GetUserRequest"
        assert request_class_name("SendRequest") == "SendRequest"

    def test_resource_group_name(self):
        assert resource_group_name("users") == "Users"
        assert resource_group_name("user accounts") == "UserAccounts"


class TestUniqueName:
    def test_free_name(self):
        assert unique_name("Address", set()) == "Address"

    def test_suffix(self):
        assert unique_name("Address", {"Address"}) == "Address2"
        assert unique_name("Address", {"Address", "Address2"}) == "Address3"

    def test_separator(self):
        assert unique_name("id", {"id", "id_2"}, separator="_") == "id_3"
