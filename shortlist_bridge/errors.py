"""Error taxonomy for the bridge."""


class BridgeError(Exception):
    """Base class for errors raised by bridge components."""


class ValidationError(BridgeError):
    """Client-caused: a required field is missing or malformed. Maps to 400."""


class NotFoundError(BridgeError):
    """A report referenced a command id the queue does not know. Maps to 404."""


class TranslationBackendError(BridgeError):
    """
    The language-model backend failed or answered with something unusable.
    Never surfaced to HTTP callers; the translator falls back on it.
    """
