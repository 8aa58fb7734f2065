# burgerline/errors.py


class BurgerlineError(Exception):
    """Base class for everything the simulation raises on purpose."""


class ConfigurationError(BurgerlineError, ValueError):
    """Rejected configuration; raised before any thread starts."""


class InvariantViolation(BurgerlineError, AssertionError):
    """
    A logic defect in the core (e.g. reserving a slot on a full griddle).
    Never retried: the simulation terminates when one surfaces.
    """
