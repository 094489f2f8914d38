"""
Domain objects exchanged with a remote scope.

The remote client only relies on their string contract: ``to_string()`` to
serialise and ``from_string()`` to rebuild (returning None for a nil value).
These JSON based implementations are the defaults and can be replaced by
passing other types to ``RemoteClient``.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class BitId:
    """Component identifier, canonical form ``[scope/]box/name[@version]``."""

    box: str
    name: str
    version: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "BitId":
        id_part, version = text, None
        if "@" in text:
            id_part, version = text.rsplit("@", 1)
            if not version:
                raise ValueError(f"Invalid component id (empty version): {text}")

        parts = id_part.split("/")
        if len(parts) == 2:
            scope, (box, name) = None, parts
        elif len(parts) == 3:
            scope, box, name = parts
        else:
            raise ValueError(f"Invalid component id: {text}")
        if not all(parts):
            raise ValueError(f"Invalid component id: {text}")
        return cls(box=box, name=name, version=version, scope=scope)

    def __str__(self) -> str:
        text = f"{self.box}/{self.name}"
        if self.scope:
            text = f"{self.scope}/{text}"
        if self.version:
            text = f"{text}@{self.version}"
        return text


def _loads(text: str, kind: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {kind}: {e}") from e


@dataclass
class ComponentObjects:
    """A serialized component together with the objects it depends on."""

    component: str
    objects: List[str] = field(default_factory=list)

    def to_string(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    @classmethod
    def from_string(cls, text: str) -> Optional["ComponentObjects"]:
        data = _loads(text, "component objects")
        if data is None:
            return None
        if not isinstance(data, dict) or "component" not in data:
            raise ValueError("Component objects must be a mapping with a 'component' key")
        return cls(component=data["component"], objects=list(data.get("objects", [])))

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class ConsumerComponent:
    """Component metadata as shown to a consumer."""

    name: str
    box: str
    version: Optional[str] = None
    scope: Optional[str] = None
    impl: Optional[str] = None
    specs: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)

    @property
    def id(self) -> BitId:
        return BitId(box=self.box, name=self.name, version=self.version, scope=self.scope)

    def to_string(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    @classmethod
    def from_string(cls, text: str) -> Optional["ConsumerComponent"]:
        data = _loads(text, "component")
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValueError("Component must be a mapping")
        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Invalid component fields: {e}") from e


@dataclass
class ScopeDescriptor:
    """Metadata a remote scope reports about itself."""

    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScopeDescriptor":
        if not isinstance(data, dict) or not data.get("name"):
            raise ValueError("Scope descriptor must be a mapping with a 'name' key")
        metadata = {key: value for key, value in data.items() if key != "name"}
        return cls(name=data["name"], metadata=metadata)

    @classmethod
    def from_string(cls, text: str) -> "ScopeDescriptor":
        return cls.from_dict(_loads(text, "scope descriptor"))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, **self.metadata}
