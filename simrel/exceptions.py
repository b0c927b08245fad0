"""
Error taxonomy for SimRel.

Every failure is a deterministic function of the parameters and the
random stream, so nothing here is meant to be retried.
"""


class SimRelError(Exception):
    """Base class for all SimRel errors."""

    pass


class InvalidParameter(SimRelError, ValueError):
    """Out-of-range or mutually inconsistent simulation parameters."""

    pass


class InvalidPosition(InvalidParameter):
    """A relevant/response position is out of range, duplicated, or cannot be allocated."""

    pass


class InvalidCovariance(SimRelError, ValueError):
    """The assembled latent covariance matrix is not positive definite."""

    pass


class NotPositiveDefinite(SimRelError, RuntimeError):
    """Cholesky factorisation failed at draw time.

    Construction already checks the covariance, so reaching this is an
    internal invariant violation rather than a user error.
    """

    pass
