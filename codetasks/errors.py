"""Typed errors raised by the task service and translated to JSON responses."""


class TaskError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, code=None, status_code=None):
        self.code = code or self.code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.code)

    def to_dict(self):
        return {"error": self.code}


class ValidationError(TaskError):
    status_code = 400
    code = "INVALID_INPUT"

    def __init__(self, message, field=None):
        super().__init__()
        self.message = message
        self.field = field

    def __str__(self):
        return self.message

    def to_dict(self):
        body = {"error": self.code, "message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class UnauthorizedError(TaskError):
    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(TaskError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(TaskError):
    status_code = 404
    code = "TASK_NOT_FOUND"


class ConflictError(TaskError):
    status_code = 409
    code = "TASK_EXISTED"


class FileStoreError(TaskError):
    status_code = 502
    code = "FILE_DELETE_FAILED"
