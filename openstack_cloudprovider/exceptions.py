"""Custom exception hierarchy for the OpenStack cloud provider."""


class CloudProviderError(Exception):
    """Base exception for all provider errors."""


class ConfigError(CloudProviderError):
    """Invalid or missing configuration."""


class EndpointResolutionError(CloudProviderError):
    """A service endpoint could not be located in the catalog for the region."""

    def __init__(self, service: str, region: str):
        super().__init__(f"Failed to find {service} endpoint for region '{region}'")
        self.service = service
        self.region = region


class NotFound(CloudProviderError):
    """Failed to find object."""

    def __init__(self, message: str = "Failed to find object"):
        super().__init__(message)


class MultipleResults(CloudProviderError):
    """A filter matched more than one object where only one was expected."""

    def __init__(self, message: str = "Multiple results where only one expected"):
        super().__init__(message)


class NoAddressFound(CloudProviderError):
    def __init__(self, message: str = "No address found for host"):
        super().__init__(message)


class AttributeNotFound(CloudProviderError):
    def __init__(self, message: str = "Expected attribute not found"):
        super().__init__(message)


class MetadataError(CloudProviderError):
    """Error reading the instance metadata service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class Unimplemented(CloudProviderError):
    def __init__(self, message: str = "unimplemented"):
        super().__init__(message)
