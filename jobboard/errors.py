"""Exception types shared by services, the access gate and routers."""


class JobboardError(Exception):
    pass


class InvalidCredentials(JobboardError):
    """Local login failed.

    The message is the same whether the username is unknown or the password is
    wrong, so a login form never reveals which accounts exist.
    """

    def __init__(self, message: str = "Wrong credentials") -> None:
        super().__init__(message)
        self.message = message


class UsernameTaken(JobboardError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Username already taken: {username}")
        self.username = username


class UnknownProvider(JobboardError):
    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown identity provider: {provider}")
        self.provider = provider


class StoreFailure(JobboardError):
    """A database operation failed; the original SQLAlchemy error is chained."""


class LoginRequired(JobboardError):
    """No authenticated user is bound to the current session."""


class RoleRequired(JobboardError):
    def __init__(self, required_role: str, actual_role: str | None) -> None:
        super().__init__(f"Role {required_role!r} required, got {actual_role!r}")
        self.required_role = required_role
        self.actual_role = actual_role
