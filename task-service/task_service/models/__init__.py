from .Task import DEFAULT_STATUS, Task, stamp
from .TaskPayload import TaskPayload
from .TaskUpdate import TaskUpdate

__all__ = ["DEFAULT_STATUS", "Task", "stamp", "TaskPayload", "TaskUpdate"]
