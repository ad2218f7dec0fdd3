"""Domain exceptions for the credentials bounded context.

These exceptions represent domain-level errors raised by aggregates and
repository implementations. The application service catches them and
converts them to typed results.
"""


class APIKeyStoreError(Exception):
    """Raised when the key record store fails to read or write.

    Wraps the underlying driver error so the application layer does not
    depend on a particular backend.
    """

    pass


class APIKeyInactiveError(Exception):
    """Raised when mutating the secret of a deactivated API key.

    Deactivation is terminal: a deactivated record keeps its last
    ciphertext for audit and cannot be rotated.
    """

    pass
