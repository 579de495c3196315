"""
JDK Table Sync Exception Hierarchy

Contains all exception classes raised by the detection/reconciliation loop
and its reference host collaborators.
"""


class JdkSyncError(Exception):
    """
    Base exception for all JDK table sync operations.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    pass


class JdkTableError(JdkSyncError):
    """
    Exception for operations on the project JDK table file.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    pass


class JdkTableParseError(JdkTableError):
    """
    Raised when the JDK table file cannot be read or is not well-formed XML.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.

    Not caught by the comparator or the reconciler; the scheduler's cycle
    wrapper logs it and skips the cycle.
    """

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse JDK table {path}: {reason}")


class ArtifactWriteError(JdkSyncError):
    """
    Raised when a marker artifact (health_check / updated) cannot be written.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write to file: {path} ({cause})")


class RegistryError(JdkSyncError):
    """
    Exception for JDK registry operations.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    pass


class RegistryLoadError(RegistryError):
    """
    Raised when a persisted registry file cannot be loaded.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    pass


class RegistrySaveError(RegistryError):
    """
    Raised when a persisted registry file cannot be saved.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    pass


class SchedulerError(JdkSyncError):
    """
    Exception for invalid scheduler usage (bad intervals, unknown project).

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    pass


__all__ = [
    "JdkSyncError",
    "JdkTableError",
    "JdkTableParseError",
    "ArtifactWriteError",
    "RegistryError",
    "RegistryLoadError",
    "RegistrySaveError",
    "SchedulerError",
]
