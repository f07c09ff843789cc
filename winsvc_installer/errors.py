"""Project-level exception hierarchy."""


class InstallerError(Exception):
    """Base for all winsvc-installer exceptions."""


class ConfigError(InstallerError):
    """Configuration file could not be read or validated."""


class ElevationError(InstallerError):
    """Privileged relaunch could not be started or completed."""


class ChildTimeoutError(ElevationError):
    """The elevated child did not exit within the configured timeout."""


class ServiceControlError(InstallerError):
    """The service-control utility could not be invoked."""


class CommandTimeoutError(ServiceControlError):
    """A service-control invocation did not finish within the configured timeout."""


class ArgumentsError(InstallerError):
    """Command-line arguments could not be parsed."""
