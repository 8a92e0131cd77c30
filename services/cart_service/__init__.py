"""Cart Service - per-user shopping carts with time-bounded validity."""

__version__ = "1.0.0"
