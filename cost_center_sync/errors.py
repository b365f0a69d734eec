"""
Error types raised while syncing a cost center.
"""


class CostCenterSyncError(Exception):
    """Base class for every failure that aborts a sync run."""
    pass


class ConfigurationError(CostCenterSyncError, ValueError):
    """Raised when the configuration is inconsistent."""
    pass


class MissingInputError(ConfigurationError):
    """Raised when a required configuration value is absent."""

    def __init__(self, setting: str, hint: str = ""):
        self.setting = setting
        message = f"Missing required input: {setting}"
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class GroupNotFoundError(CostCenterSyncError):
    """Raised when no cost center matches the requested name."""

    def __init__(self, name: str, available=None):
        self.name = name
        self.available = list(available or [])
        available_names = ", ".join(self.available) if self.available else "none"
        super().__init__(
            f"Cost center with name {name} not found. Available cost centers: {available_names}"
        )


class SourceFetchFailedError(CostCenterSyncError):
    """Raised when member lists could not be fetched from a source."""

    def __init__(self, message: str, source=None):
        self.source = source
        super().__init__(message)


class MutationFailedError(CostCenterSyncError):
    """Raised when adding or removing a cost center member fails."""

    def __init__(self, message: str, username: str = None, action: str = None):
        self.username = username
        self.action = action
        super().__init__(message)


class AuthFailedError(CostCenterSyncError):
    """Raised when GitHub rejects the configured credentials."""
    pass
