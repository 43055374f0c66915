from envfleet.clients.platform import (
    App,
    DeploymentRecord,
    EnvVar,
    PlatformClient,
    PlatformError,
    ResourceClient,
    ResourceNotFoundError,
)

__all__ = [
    "App",
    "DeploymentRecord",
    "EnvVar",
    "PlatformClient",
    "PlatformError",
    "ResourceClient",
    "ResourceNotFoundError",
]
