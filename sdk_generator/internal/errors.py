from typing import Optional


class SpecificationError(Exception):
    """Структурно некорректный OpenAPI документ"""


class UnresolvedReferenceError(Exception):
    def __init__(self, target_name: str):
        self.target_name = target_name
        super().__init__(f"Схема '{target_name}' не найдена в спецификации")


class GenerationError(Exception):
    """Фатальная ошибка генерации с указанием эндпоинта и статуса"""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status: Optional[int] = None,
        schema: Optional[str] = None,
    ):
        self.message = message
        self.endpoint = endpoint
        self.status = status
        self.schema = schema

        location = []
        if endpoint is not None:
            location.append(f"endpoint={endpoint}")
        if status is not None:
            location.append(f"status={status}")
        if schema is not None:
            location.append(f"schema={schema}")

        super().__init__(f"[{', '.join(location) or 'spec'}] {message}")
