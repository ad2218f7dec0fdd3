"""Domain-Oriented Observability for the credentials application layer."""

from credentials.application.observability.admin_authentication_probe import (
    AdminAuthenticationProbe,
    DefaultAdminAuthenticationProbe,
)
from credentials.application.observability.api_key_service_probe import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)

__all__ = [
    "AdminAuthenticationProbe",
    "APIKeyServiceProbe",
    "DefaultAdminAuthenticationProbe",
    "DefaultAPIKeyServiceProbe",
]
