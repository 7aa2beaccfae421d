"""Scenes holding entities that pair a transform with a drawable."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .mathutil import Matrix


class SceneEntity:
    """An object placed in a scene."""

    def __init__(self, scene: "Scene") -> None:
        self.scene = scene
        self.entity_index = -1
        self.matrix = Matrix()
        self.drawable: Optional[Any] = None

    def set_matrix(self, matrix: Matrix) -> None:
        """Set the entity's world transform."""
        self.matrix = matrix

    def update(self) -> None:
        """Refresh the entity's index within its scene, -1 if it is not there."""
        entities = self.scene.entities
        self.entity_index = next(
            (position for position, entity in enumerate(entities) if entity is self), -1
        )


class Scene:
    """A set of entities rendered through one render device."""

    def __init__(self, render_device: Any = None) -> None:
        self.render_device = render_device
        self.entities: list[SceneEntity] = []

    def release(self) -> None:
        """Drop every entity in the scene."""
        self.entities.clear()

    def render(self, viewport: Any) -> None:
        """Draw every entity that has a drawable attached."""
        for entity in self.entities:
            if entity.drawable is not None:
                entity.drawable.draw(entity.matrix, False)

    def create_entity(self) -> SceneEntity:
        entity = SceneEntity(self)
        self.entities.append(entity)
        return entity


@dataclass(frozen=True)
class SceneId:
    name: str
    id: int


class SceneManager:
    """Creates scenes; one shared instance is made by :meth:`create`."""

    instance: ClassVar[Optional["SceneManager"]] = None

    def create_scene(self, render_device: Any, scene_id: SceneId) -> Scene:
        return Scene(render_device)

    @classmethod
    def create(cls) -> "SceneManager":
        SceneManager.instance = cls()
        return SceneManager.instance