class HealingError(RuntimeError):
    """Base class for locator healing failures."""


class UnsupportedStrategy(HealingError, ValueError):
    """Raised when a wire "using" value is not one of the known locator strategies."""

    def __init__(self, using: object) -> None:
        super().__init__(f"Unsupported locator strategy: {using!r}")
        self.using = using


class CaptureFault(HealingError):
    """Raised when the healing engine rejects a successful lookup capture."""

    def __init__(self, message: str, page_identity: str = "") -> None:
        super().__init__(message)
        self.page_identity = page_identity


class ResolutionFault(HealingError):
    """Raised when history lookup, tree parsing, or scoring fails during healing."""
