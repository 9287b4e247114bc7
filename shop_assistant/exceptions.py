class ShopAssistantError(Exception):
    """Base class for errors raised inside the chat pipeline."""


class StorageError(ShopAssistantError):
    """The history or catalog store could not be read or written."""


class GatewayError(ShopAssistantError):
    """The chat completion provider failed, timed out or refused the request."""
