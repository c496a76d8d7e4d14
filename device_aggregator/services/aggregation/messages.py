"""
Event Channel Messages

Produced by device tasks (ValueChange) and the config watcher
(ConfigChanged); consumed only by the supervisor.
"""

from dataclasses import dataclass
from typing import Union

from ...common.config import DeviceSet


@dataclass(frozen=True)
class ValueChange:
    """A device reported a new current value"""
    name: str
    value: float


@dataclass(frozen=True)
class ConfigChanged:
    """The device set was replaced"""
    new_set: DeviceSet


Message = Union[ValueChange, ConfigChanged]
