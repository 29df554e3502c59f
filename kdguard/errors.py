# kdguard exceptions
#


class KdguardError(Exception):
    """Base class of all kdguard errors."""


class ValidationError(KdguardError, ValueError):
    """Invalid input, detected before any randomness is consumed."""


class InvalidLength(ValidationError):
    pass


class InvalidPattern(ValidationError):
    pass


class InvalidWordCount(ValidationError):
    pass


class WordlistUnavailable(ValidationError):
    pass


class MissingSeed(ValidationError):
    pass


class EmptyPassword(ValidationError):
    pass


class WordlistError(KdguardError):
    """Word list or common password list could not be loaded or is malformed."""


class RandomSourceError(KdguardError, RuntimeError):
    """The secure random source is unable to provide entropy."""


class DerivationError(KdguardError, RuntimeError):
    """Key derivation did not produce a usable password. This is a bug."""
