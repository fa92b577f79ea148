"""Errors raised by the streaming relay."""


class GenerationError(Exception):
    """Remote generation failed.

    Wraps any failure of the remote call (network, auth, quota, malformed
    response). The original exception is kept as ``__cause__`` and its
    message is embedded in this one.
    """

    def __init__(self, message: str):
        super().__init__(f"Generation failed: {message}")
        self.original_message = message
