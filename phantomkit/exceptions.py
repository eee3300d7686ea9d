"""Custom exceptions for PhantomKit."""


class PhantomKitError(Exception):
    """Base exception for all PhantomKit errors."""


class ProjectNotFoundError(PhantomKitError):
    """Raised when the target directory is missing, not a directory, or unreadable."""

    def __init__(self, path: str, reason: str = "not found"):
        self.path = path
        self.reason = reason
        super().__init__(f"Project directory {reason}: {path}")


class ScaffoldError(PhantomKitError):
    """Raised when a generated project file cannot be written."""


class ManifestValidationError(PhantomKitError):
    """Raised when a phantom.toml manifest fails validation."""

    def __init__(self, path: str, problems: list[str]):
        self.path = path
        self.problems = problems
        super().__init__(
            f"Manifest {path} is invalid ({len(problems)} problem(s)): " + "; ".join(problems)
        )
