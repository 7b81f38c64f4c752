class BaseServiceError(Exception):
    detail: str = "Unexpected service error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.detail
        super().__init__(self.detail)


class AuthError(BaseServiceError):
    detail = "You are not authenticated"


class PermissionDeniedError(BaseServiceError):
    detail = "You do not have permission to perform this action"


class NotFoundError(BaseServiceError):
    detail = "Object not found"


class InvalidLimitError(BaseServiceError):
    detail = "Please enter a valid limit amount greater than 0"


class NetworkError(BaseServiceError):
    detail = "Transaction store is unreachable, try again later"


class ComputationError(BaseServiceError):
    detail = "Transaction store returned data of an unexpected shape"
