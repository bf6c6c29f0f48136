"""Утилиты нормализации имен: классы, переменные, группы ресурсов"""

import keyword
import re
from typing import Set

# Имена, которые перекрывают импорты typing в сгенерированных модулях
RESERVED_TYPE_NAMES = {
    "Any",
    "Dict",
    "List",
    "Optional",
    "Union",
    "Literal",
    "BaseModel",
    "Field",
    "ConfigDict",
    "Request",
}


def is_blank_name(name: str) -> bool:
    """Пустые и пробельные имена свойств пропускаются целиком"""
    return name is None or not str(name).strip()


def snake_case(name: str) -> str:
    """
    Преобразование произвольного имени в snake_case.

    Examples:
        >>> snake_case("HTTPValidationError")
        'http_validation_error'
        >>> snake_case("user-id")
        'user_id'
    """
    # Все кроме букв и цифр превращаем в подчеркивания
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name)

    # HTTPValidationError -> HTTP_Validation_Error -> http_validation_error
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1)
    s3 = re.sub("([A-Z]+)([A-Z][a-z])", r"\1_\2", s2)
    s4 = re.sub("_+", "_", s3)
    return s4.strip("_").lower()


def pascal_case(name: str) -> str:
    """Правильное PascalCase преобразование с сохранением границ camelCase"""
    return "".join(part[:1].upper() + part[1:] for part in snake_case(name).split("_"))


def normalize_identifier(raw: str) -> str:
    """
    Очистка имени для использования как идентификатор Python.

    Результат всегда непустой, не начинается с цифры
    и не совпадает с ключевым словом.
    """
    name = snake_case(str(raw or ""))

    if not name:
        name = "param"

    if name[0].isdigit():
        name = f"param_{name}"

    if keyword.iskeyword(name):
        name = f"{name}_field"

    return name


def variable_name(raw: str) -> str:
    return normalize_identifier(raw)


def module_name(raw: str) -> str:
    """Имя модуля (сегмента namespace) в snake_case"""
    return normalize_identifier(raw)


def type_name(base_name: str) -> str:
    """
    Имя типа для DTO.

    Чистая функция: одно и то же базовое имя всегда дает одно и то же имя типа,
    поэтому ссылка на схему "User" и определение схемы "User" совпадают.
    """
    name = pascal_case(str(base_name or ""))

    if not name:
        name = "Model"

    if name[0].isdigit():
        name = f"Model{name}"

    if name in RESERVED_TYPE_NAMES or keyword.iskeyword(name):
        name = f"{name}Model"

    return name


dto_class_name = type_name


def response_class_name(endpoint_name: str, status: int) -> str:
    """GetUser + 200 -> GetUser200Response"""
    return type_name(f"{endpoint_name}{status}") + "Response"


def request_class_name(endpoint_name: str) -> str:
    name = type_name(endpoint_name)
    if name.endswith("Request"):
        return name
    return f"{name}Request"


def resource_group_name(collection: str) -> str:
    return type_name(collection)


def unique_name(candidate: str, used: Set[str], separator: str = "") -> str:
    """
    Дедупликация имени числовым суффиксом.

    Examples:
        >>> unique_name("Address", {"Address"})
        'Address2'
        >>> unique_name("id", {"id", "id_2"}, separator="_")
        'id_3'
    """
    if candidate not in used:
        return candidate

    counter = 2
    while f"{candidate}{separator}{counter}" in used:
        counter += 1

    return f"{candidate}{separator}{counter}"
