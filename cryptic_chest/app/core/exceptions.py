# cryptic_chest/app/core/exceptions.py
"""
Error taxonomy for the credential envelope.

Every error names the operation that raised it so callers can decide
whether to retry (only RecoveryPhraseError is worth retrying) or abort.
"""


class CrypticChestError(Exception):
    """Base class for all domain errors."""

    kind = "error"

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class ConfigurationError(CrypticChestError):
    """Password generator invoked with an unusable option set."""

    kind = "configuration_error"


class FormatError(CrypticChestError):
    """Ciphertext, backup blob or backup payload has the wrong shape."""

    kind = "format_error"


class KeyMismatchError(CrypticChestError):
    """Key-check segment of a ciphertext does not match the supplied key."""

    kind = "key_mismatch"


class RecoveryPhraseError(CrypticChestError):
    """Backup check segment does not match the supplied recovery phrase."""

    kind = "recovery_phrase_error"


class AccessDeniedError(CrypticChestError):
    """Credential record belongs to another user."""

    kind = "access_denied"
