"""Custom exceptions for pod placement and mount resolution."""


class PlacementError(Exception):
    """Base exception for all pod placement errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class InvalidTolerationSpec(PlacementError):
    """Raised when a toleration is built with an inconsistent operator/value pair."""

    pass


class ResolutionError(PlacementError):
    """Base exception for mount and command template resolution failures."""

    pass


class UnknownVolumeReference(ResolutionError):
    """Raised when a volume mount names a volume the pod does not declare."""

    def __init__(self, volume_name: str, details: str = None):
        self.volume_name = volume_name
        super().__init__(f"Volume mount references unknown volume '{volume_name}'", details)


class DuplicateMountPath(ResolutionError):
    """Raised when two mounts of one container target the same path."""

    def __init__(self, mount_path: str, details: str = None):
        self.mount_path = mount_path
        super().__init__(f"Mount path '{mount_path}' is used by more than one mount", details)


class UnresolvedPlaceholder(ResolutionError):
    """Raised when a command template placeholder has no binding."""

    def __init__(self, identifier: str, details: str = None):
        self.identifier = identifier
        super().__init__(f"Placeholder '{{{{ {identifier} }}}}' cannot be resolved", details)


class ManifestError(PlacementError):
    """Exception raised for unreadable or malformed manifest documents."""

    pass


class ConfigurationError(PlacementError):
    """Exception raised for node profile configuration errors."""

    pass
