"""
vault-ethereum custom exception hierarchy
"""


class VaultEthereumError(Exception):
    """vault-ethereum base exception"""

    pass


class ConfigurationError(VaultEthereumError):
    """Configuration-related error"""

    pass


class NotConnectedError(ConfigurationError):
    """No chain provider bound to the signer"""

    pass


class VaultRequestError(VaultEthereumError):
    """Vault answered with a non-success status or an unreadable body"""

    def __init__(self, method: str, path: str, status_code: int | None, detail: str = ""):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.detail = detail
        message = f"Vault request {method} {path} failed"
        if status_code is not None:
            message += f" with HTTP {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class AuthError(VaultEthereumError):
    """Authentication-related error"""

    pass


class AuthMethodUnknownError(AuthError):
    """Credential carries an authentication method that is not supported"""

    def __init__(self, method: object):
        self.method = method
        super().__init__(f"Vault authentication method {method!r} does not exist")


class IdentityDocumentUnavailableError(AuthError):
    """Kubernetes service account token could not be read"""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Workload identity document unavailable at {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AuthenticationError(AuthError):
    """Login did not produce a Vault token"""

    pass


class AccountLookupError(AuthError):
    """Account address could not be resolved with the Vault token"""

    def __init__(self, account_id: str, reason: str = ""):
        self.account_id = account_id
        message = f"Failed to resolve address for account {account_id!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotAuthenticatedError(AuthError):
    """Signer used before authenticate() completed"""

    def __init__(self, message: str = "Vault signer is not authenticated"):
        super().__init__(message)


class SignatureError(VaultEthereumError):
    """Signature-related error"""

    pass


class FromAddressMismatchError(SignatureError):
    """Transaction ``from`` does not match the authenticated account"""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Transaction from address mismatch: expected {expected}, got {actual}")


class RemoteSignError(SignatureError):
    """Vault sign endpoint failed or returned a malformed response"""

    def __init__(self, endpoint: str, status_code: int | None = None, reason: str = ""):
        self.endpoint = endpoint
        self.status_code = status_code
        message = f"Remote signing via {endpoint} failed"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SigningNotImplementedError(SignatureError, NotImplementedError):
    """Signing scheme not supported by the Vault plugin"""

    pass


class SignatureVerificationError(SignatureError):
    """Signature could not be recovered to an address"""

    pass
