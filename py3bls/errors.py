"""Error types for py3bls."""


class BLSError(Exception):
    """Base class for py3bls errors."""


class InvalidArgumentError(BLSError, ValueError):
    """A precondition on an argument failed.

    Raised before any cryptographic work is done. Verification functions never
    raise this for a well-formed signature that simply does not verify; they
    return ``False`` instead.
    """
