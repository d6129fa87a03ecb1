"""Authentication failure taxonomy.

The distinctions exist for diagnostics only. At the HTTP boundary every
``AuthenticationError`` collapses into the same rejection.
"""


class AuthenticationError(Exception):
    """Base class for every authentication failure."""


class TokenMalformed(AuthenticationError):
    """Header missing, not prefixed correctly, or not a decodable token."""


class TokenInvalidSignature(AuthenticationError):
    """Token signature does not verify, or the token has the wrong subject."""


class TokenExpired(AuthenticationError):
    """Token signature is valid but its expiry has passed."""


class RefreshTokenMismatch(AuthenticationError):
    """Refresh token verifies but is not the one stored for any account."""


class AccountNotFound(AuthenticationError):
    """The account a token or credential refers to does not exist."""


class CredentialInvalid(AuthenticationError):
    """Username/password pair rejected at login."""
