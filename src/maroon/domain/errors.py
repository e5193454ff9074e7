from pathlib import Path
from typing import Optional


class MaroonError(Exception):
    """base class for exceptions in Maroon."""
    pass


class NotFoundError(MaroonError):
    """raised when a profile does not exist in the store."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' does not exist")


class AlreadyExistsError(MaroonError):
    """raised when adding a profile whose name is already taken."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' already exists")


class ValidationError(MaroonError):
    """raised when a profile name, account id, role or region is malformed."""
    pass


class ApiError(MaroonError):
    """base class for failures reported by the Maroon API."""
    pass


class InvalidOrExpiredTokenError(ApiError):
    """raised when the API rejects the bearer token (HTTP 401)."""
    def __init__(self, message: str = "Invalid/expired token"):
        super().__init__(message)


class RequestFailedError(ApiError):
    """raised for any other API failure: status, transport or payload."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class MissingTokenError(MaroonError):
    """raised when no bearer token can be found."""
    pass


class RefreshFailedError(MaroonError):
    """raised when fresh credentials could not be obtained for a profile."""
    def __init__(self, profile_name: str, reason: Exception):
        self.profile_name = profile_name
        self.reason = reason
        super().__init__(f"Could not fetch credentials for profile '{profile_name}': {reason}")


class FileIOError(MaroonError):
    """raised when a local file cannot be read, written or replaced."""
    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        super().__init__(f"{message} ({self.path})")


class ParseError(MaroonError):
    """raised when a persisted JSON or INI file is malformed."""
    def __init__(self, message: str, path: Optional[Path] = None, line: Optional[int] = None):
        self.path = Path(path) if path is not None else None
        self.line = line
        location = ""
        if self.path is not None:
            location = f" in {self.path}"
        if line is not None:
            location += f" at line {line}"
        super().__init__(f"{message}{location}")
