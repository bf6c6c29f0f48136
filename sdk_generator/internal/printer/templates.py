class Templates:
    """Шаблоны для генерации файлов"""

    request = """import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class UnexpectedStatusError(Exception):
    def __init__(self, response: httpx.Response, path: str):
        self.response = response
        self.path = path
        self.status_code = response.status_code
        super().__init__(f"[{response.status_code}] {path}: неожиданный статус ответа")


class Request:
    \"\"\"Базовый класс сгенерированных запросов\"\"\"

    method: str = "GET"
    has_body: bool = False

    def resolve_endpoint(self) -> str:
        raise NotImplementedError

    def default_body(self) -> Dict[str, Any]:
        return {}

    def default_query(self) -> Dict[str, Any]:
        return {}

    def default_headers(self) -> Dict[str, Any]:
        return {}

    @staticmethod
    def filter_unset(values: Dict[str, Any]) -> Dict[str, Any]:
        \"\"\"Только не-None значения: пустые опциональные поля не отправляются\"\"\"
        return {k: v for k, v in values.items() if v is not None}

    def create_dto_from_response(self, response: httpx.Response) -> Any:
        return response.json() if response.content else None

    def build(self, client: httpx.Client | httpx.AsyncClient) -> httpx.Request:
        headers = {k: str(v) for k, v in self.default_headers().items()}

        return client.build_request(
            self.method,
            self.resolve_endpoint(),
            params=self.default_query() or None,
            headers=headers or None,
            json=self.default_body() if self.has_body else None,
        )

    def send(self, client: httpx.Client) -> Any:
        request = self.build(client)
        logger.debug("%s %s", request.method, request.url)

        response = client.send(request)
        return self.create_dto_from_response(response)

    async def send_async(self, client: httpx.AsyncClient) -> Any:
        request = self.build(client)
        logger.debug("%s %s", request.method, request.url)

        response = await client.send(request)
        return self.create_dto_from_response(response)
"""

    dto_imports = [
        "from __future__ import annotations",
        "",
        "from typing import Any, Dict, List, Optional, Union",
        "",
        "from pydantic import BaseModel, ConfigDict, Field",
    ]

    request_imports = [
        "from typing import Any, Dict, List, Optional, Union",
        "",
        "import httpx",
    ]

    config = """# Configuration for SDK generator
url = "{url}"
namespace = "{namespace}"
"""


templates = Templates()
