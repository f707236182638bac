from uuid import UUID


class ValidationError(Exception):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class RosterError(Exception):
    pass


class RosterTooSmallError(RosterError):
    def __init__(self, count: int):
        super().__init__(f"Roster must have at least 1 player, got {count}")
        self.count = count


class RosterTooLargeError(RosterError):
    def __init__(self, count: int, limit: int):
        super().__init__(f"Roster of {count} players exceeds the limit of {limit}")
        self.count = count
        self.limit = limit


class RepositoryError(Exception):
    pass


class StoreUnavailableError(RepositoryError):
    pass


class StoreRejectedError(RepositoryError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class RecordNotFoundError(RepositoryError):
    def __init__(self, entity: str, record_id: UUID | str | None = None):
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class RegistrationError(Exception):
    pass


class IncompleteRosterError(RegistrationError):
    def __init__(self, positions: list[int]):
        super().__init__(f"Blank player names at positions {positions}")
        self.positions = positions


class InvalidRosterSizeError(RegistrationError):
    pass


class RegistrationFailedError(RegistrationError):
    """
    The store rejected one of the registration writes.

    ``team`` is set when the team row survived a failed player insert, i.e. the
    compensating delete did not go through either.
    """

    def __init__(self, message: str, team=None, rolled_back: bool = False):
        super().__init__(message)
        self.team = team
        self.rolled_back = rolled_back


class AuthError(Exception):
    pass


class InvalidCredentialsError(AuthError):
    pass


class InvalidTokenError(AuthError):
    pass


class InsufficientRoleError(AuthError):
    def __init__(self, role: str):
        super().__init__(f"Role '{role}' required")
        self.role = role


class UserAlreadyExistsError(AuthError):
    pass
