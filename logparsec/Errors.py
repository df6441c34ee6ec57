class LogparsecError(Exception):
    """Base class for exceptions raised by logparsec."""
    pass


class GrammarError(LogparsecError):
    """Raised when the grammar definition itself contains errors.

    Problems in the *input* are never raised; they are reported through the
    diagnostic Logger and a failed parse.
    """
    pass
