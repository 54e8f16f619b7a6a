"""
Доменная модель контекста залов (инвентарь помещений).
"""

from typing import List

from pydantic import Field

from ..shared_kernel import EntityId, Record, generate_id


class Room(Record):
    """Зал, который можно забронировать."""

    id: EntityId
    name: str = Field(..., min_length=1)
    capacity: int = Field(..., gt=0)
    features: List[str] = Field(default_factory=list)  # Оснащение зала, порядок важен
    image_url: str = ""

    @classmethod
    def create(
        cls,
        name: str,
        capacity: int,
        features: List[str],
        image_url: str = "",
    ) -> "Room":
        """Создает новый зал со сгенерированным идентификатором."""
        return cls(
            id=generate_id("room"),
            name=name,
            capacity=capacity,
            features=features,
            image_url=image_url,
        )
