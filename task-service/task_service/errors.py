class TaskServiceError(Exception):
    pass


class InvalidTaskID(TaskServiceError, ValueError):
    def __init__(self, raw: str):
        super().__init__(f"malformed task id: {raw!r}")
        self.raw = raw


class TaskNotFound(TaskServiceError):
    def __init__(self, task_id: str):
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class StorageFailure(TaskServiceError):
    """Any error coming out of the persistence layer."""


class RecordDecodeError(StorageFailure):
    """A stored document could not be turned back into a Task."""
