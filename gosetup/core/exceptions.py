"""
Centralized exception hierarchy for gosetup.

Every error raised by a setup step is fatal to the run. The CLI converts the
first one into a single message and a non-zero exit code.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class GoSetupError(Exception):
    """Base exception for all gosetup errors."""

    pass


# ============================================================================
# Input / Configuration Exceptions
# ============================================================================


class ConfigurationError(GoSetupError):
    """Raised for invalid or missing configuration (e.g. a missing version file)."""

    pass


class ParseError(GoSetupError):
    """Raised when tool output or a version file does not have the expected shape."""

    pass


# ============================================================================
# Toolchain Exceptions
# ============================================================================


class InstallError(GoSetupError):
    """Raised when no release satisfies the requested version/architecture."""

    pass


class DownloadError(InstallError):
    """Raised when a release archive cannot be downloaded."""

    pass


class ChecksumError(DownloadError):
    """Raised when a downloaded archive does not match its checksum."""

    pass


class ArchiveExtractionError(InstallError):
    """Raised when a release archive cannot be extracted."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Raised when an archive member would escape the extraction directory."""

    pass


class NotFoundError(GoSetupError):
    """Raised when the go binary is absent from the search path."""

    def __init__(self, executable: str = "go"):
        self.executable = executable
        super().__init__(
            f"Unable to locate executable file: {executable}. "
            "Please verify the toolchain was installed and added to PATH."
        )


class ExternalToolError(GoSetupError):
    """Raised when an invoked subprocess fails or cannot be started."""

    def __init__(self, command: str, message: str, returncode: int = -1):
        self.command = command
        self.returncode = returncode
        super().__init__(f"'{command}' failed: {message}")


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(GoSetupError):
    """Raised when the dependency cache cannot be restored or saved."""

    pass
