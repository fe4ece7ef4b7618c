"""Error taxonomy for the trend pipeline."""


class FetchError(Exception):
    """A single source failed. Never fatal: the source degrades to empty."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class ParseError(FetchError):
    """Upstream payload did not have the expected shape."""


class GenerationError(Exception):
    """Text generation failed or returned unusable content."""


class RunError(Exception):
    """No trends came back from any source."""


class DeliveryError(Exception):
    """Telegram rejected a request."""

    def __init__(self, status_code: int, description: str):
        super().__init__(f"Telegram API {status_code}: {description}")
        self.status_code = status_code
        self.description = description

    @property
    def blocked(self) -> bool:
        """The chat blocked the bot or no longer exists."""
        return self.status_code == 403
