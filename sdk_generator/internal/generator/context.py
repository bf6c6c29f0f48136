from typing import Dict, List, Set

from ..types.models import DtoArtifact
from ..utils.naming import unique_name


class GenerationContext:
    """
    Изменяемое состояние одного запуска генерации.

    Создается заново на каждый вызов generate и никогда не разделяется
    между запусками.
    """

    def __init__(self):
        # Кэш дедупликации: имя типа -> DTO
        self.generated: Dict[str, DtoArtifact] = {}
        self.dtos: List[DtoArtifact] = []
        self.used_names: Set[str] = set()

    def claim(self, candidate: str) -> str:
        """Резервирование уникального имени типа"""
        name = unique_name(candidate, self.used_names)
        self.used_names.add(name)
        return name

    def is_claimed(self, name: str) -> bool:
        return name in self.used_names

    def add_dto(self, artifact: DtoArtifact) -> DtoArtifact:
        self.generated[artifact.type_name] = artifact
        self.dtos.append(artifact)
        return artifact
