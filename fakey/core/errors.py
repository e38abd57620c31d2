"""
errors.py — Hard-failure exception types.

Only "the model produced nothing usable" conditions get an exception here.
Malformed or partial JSON is never an error (see ai/normalizer.py), and
SDK transport/auth errors propagate as the SDK raised them.
"""


class GenerationError(Exception):
    """A generation call completed but returned no usable artifact."""


class ImageGenerationError(GenerationError):
    """Image generation returned no inline image part."""


class VideoGenerationError(GenerationError):
    """Video generation finished without a resolvable download URI."""


class OperationTimeoutError(GenerationError):
    """A long-running operation exceeded the configured poll attempts."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Operation still running after {attempts} status checks.")
        self.attempts = attempts
