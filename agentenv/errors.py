"""Exception hierarchy for agent-environment.

All fatal conditions inherit from AgentEnvError (single catch point in the
CLI). Messages name the stage that failed so the log line alone is enough
to act on.
"""


class AgentEnvError(Exception):
    """Base exception for all fatal installer errors."""


class ConfigError(AgentEnvError):
    """Configuration file could not be read or holds invalid values."""


class UnsupportedPlatform(AgentEnvError):
    """Operating system or CPU architecture is not recognized."""


class UnsupportedPlatformForTool(AgentEnvError):
    """Platform is recognized but the tool publishes no artifact for it."""

    def __init__(self, tool: str, platform_key: str):
        super().__init__(f"Unsupported platform for {tool}: {platform_key}")
        self.tool = tool
        self.platform_key = platform_key


class DownloadFailure(AgentEnvError):
    """Transport failed after the HTTP layer exhausted its retries."""


class ArchiveExtractionFailure(AgentEnvError):
    """Downloaded archive is corrupt or in an unsupported format."""


class BinaryNotFoundInArchive(AgentEnvError):
    """Unpacked archive does not contain the expected executable."""

    def __init__(self, binary: str, archive: str):
        super().__init__(f"'{binary}' not found inside {archive}")
        self.binary = binary
        self.archive = archive


class DependentInstallFailure(AgentEnvError):
    """A delegated tool (uv, fnm) exited non-zero while installing."""


class VerificationWarning(Warning):
    """Post-install sanity check failed. Logged, never fatal."""
