"""Error types raised by the service layer.

Routes never translate these by hand: the application registers a single
error handler that renders ``to_dict()`` with ``status_code``.
"""


class GoalServiceError(Exception):
    status_code = 500
    code = 'GOAL_SERVICE_ERROR'

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {'code': self.code, 'message': self.message}


class NotFoundError(GoalServiceError):
    status_code = 404
    code = 'NOT_FOUND'


class InvalidArgumentError(GoalServiceError):
    status_code = 400
    code = 'INVALID_ARGUMENT'


class ConflictError(GoalServiceError):
    status_code = 409
    code = 'CONFLICT'
