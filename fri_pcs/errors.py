"""Error taxonomy for the FRI commitment scheme.

Construction errors are caller contract violations: they are raised
immediately and never retried. Verification failures are expected outcomes
on adversarial input and are reported as a plain rejection, never raised.
"""

from enum import Enum


class FriError(Exception):
    """Base class for all errors raised by this package."""


class ConstructionError(FriError):
    """A caller violated the contract of an operation."""


class InvalidDomainSize(ConstructionError, ValueError):
    """Domain size is not a power of two dividing p - 1, or does not match the input."""


class InvalidInputLength(ConstructionError, ValueError):
    """Evaluation vector length does not match the initial domain."""


class DegreeTooLarge(ConstructionError, ValueError):
    """Claimed degree bound cannot be reached with the requested fold rounds."""


class DivisionByZero(ConstructionError, ZeroDivisionError):
    """Inversion of the zero field element."""


class NonPowerOfTwoLeafCount(ConstructionError, ValueError):
    """Merkle tree leaf count is not a power of two."""


class MalformedProof(ConstructionError, ValueError):
    """Proof structure does not match the public parameters."""


class RejectReason(Enum):
    """Why a verifier rejected a proof. Only surfaced in debug logs."""

    MERKLE_PATH_MISMATCH = "merkle path mismatch"
    FOLD_CONSISTENCY_MISMATCH = "fold consistency mismatch"
    FINAL_VALUE_MISMATCH = "final value mismatch"
