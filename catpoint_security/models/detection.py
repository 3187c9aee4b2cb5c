"""Detection data models."""

from dataclasses import dataclass


@dataclass
class BoundingBox:
    """Represents a bounding box around a detected cat."""
    x: int
    y: int
    width: int
    height: int
    confidence: float  # percent, 0-100

    def area(self) -> int:
        """Calculate the area of the bounding box."""
        return self.width * self.height

    def center(self) -> tuple[int, int]:
        """Get the center point of the bounding box."""
        return (self.x + self.width // 2, self.y + self.height // 2)
