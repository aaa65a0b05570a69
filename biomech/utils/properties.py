"""Declared properties and host change notification.

Objects that expose editable state to a host (scene, GUI panel) declare it
as a tuple of ``PropertyInfo`` records and report every mutation through
``notify_host_of_property_change``. Listeners are plain callables invoked as
``callback(source, property_name)``.
"""

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, List, Optional, Tuple

ChangeListener = Callable[[Any, str], None]


@dataclass(frozen=True)
class PropertyInfo:
    """Description of one host-visible property.

    Attributes:
        name: Attribute name on the owning object
        description: Short human-readable description
        default: Default value
        format: Optional display format, e.g. "1E %8.3f [-360,360]"
    """
    name: str
    description: str
    default: Any = None
    format: Optional[str] = None


class PropertyHost:
    """Mixin holding change listeners and the declared property table."""

    PROPERTIES: ClassVar[Tuple[PropertyInfo, ...]] = ()

    def _init_listeners(self):
        self._listeners: List[ChangeListener] = []

    @classmethod
    def property_names(cls) -> List[str]:
        return [info.name for info in cls.PROPERTIES]

    @classmethod
    def property_info(cls, name: str) -> PropertyInfo:
        for info in cls.PROPERTIES:
            if info.name == name:
                return info
        raise KeyError(f"{cls.__name__} has no property '{name}'")

    def get_property(self, name: str) -> Any:
        if name not in self.property_names():
            raise KeyError(f"{type(self).__name__} has no property '{name}'")
        return getattr(self, name)

    def set_property(self, name: str, value: Any):
        if name not in self.property_names():
            raise KeyError(f"{type(self).__name__} has no property '{name}'")
        setattr(self, name, value)

    def add_change_listener(self, callback: ChangeListener):
        """Register callback(source, property_name)."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_change_listener(self, callback: ChangeListener):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def notify_host_of_property_change(self, name: str):
        for callback in list(self._listeners):
            callback(self, name)
