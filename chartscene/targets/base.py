from __future__ import annotations

from abc import ABC, abstractmethod

from chartscene.scene import Scene


class SceneTarget(ABC):
    """Drawing surface that accepts a whole scene and supports full clears.

    One render cycle owns the target: callers serialize updates themselves.
    """

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def present(self, scene: Scene) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def scene(self) -> Scene | None:
        raise NotImplementedError


class SceneBuffer(SceneTarget):
    """In-memory target that keeps the last presented scene."""

    def __init__(self) -> None:
        self._scene: Scene | None = None
        self.clear_count = 0
        self.present_count = 0

    def clear(self) -> None:
        self._scene = None
        self.clear_count += 1

    def present(self, scene: Scene) -> None:
        self._scene = scene
        self.present_count += 1

    @property
    def scene(self) -> Scene | None:
        return self._scene
