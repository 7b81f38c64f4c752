from expense_tracker.services.errors import AuthError, BaseServiceError


class UserAlreadyExists(BaseServiceError):
    detail = "A user with this email is already registered"


class AuthenticationError(AuthError):
    detail = "Authentication failed"


class WrongPasswordError(AuthError):
    detail = "Check that your email and password are correct"
