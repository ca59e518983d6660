"""Scene objects owned by a player."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List


@dataclass
class GameObject:
    """
    One object instance in a player's scene.

    `name` tells the client which prototype to spawn, `uuid` identifies this
    particular instance so it can be moved or removed later.
    """

    name: str
    uuid: str
    x: float = 0
    y: float = 0

    def update(self, name: str, uuid: str, x: float, y: float) -> None:
        """Replace all values in place."""
        self.name = name
        self.uuid = uuid
        self.x = x
        self.y = y

    def get(self) -> List[Any]:
        """Return the object data as [name, uuid, x, y]."""
        return [self.name, self.uuid, self.x, self.y]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize object for transport payloads."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameObject':
        """Build an object from a transport payload."""
        if not isinstance(data, dict):
            raise ValueError(f"Object payload must be a dict, got {type(data).__name__}")
        missing = [key for key in ("name", "uuid") if key not in data]
        if missing:
            raise ValueError(f"Object payload missing fields: {', '.join(missing)}")
        for key in ("name", "uuid"):
            if not isinstance(data[key], str):
                raise ValueError(f"Object field '{key}' must be a string")
        x = data.get("x", 0)
        y = data.get("y", 0)
        for key, value in (("x", x), ("y", y)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Object field '{key}' must be a number")
        return cls(name=data["name"], uuid=data["uuid"], x=x, y=y)
