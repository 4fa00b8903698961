"""Exceptions for examination operations."""


class ExamError(ValueError):
    """Invalid input at the examination API boundary."""

    pass


class InvalidProbeError(ExamError):
    """Probe score, level or layer outside the accepted domain."""

    pass


class InvalidBodyError(ExamError):
    """Unknown credentialing body."""

    pass
