class ConfigError(RuntimeError):
    pass


class ReviewError(RuntimeError):
    """A fatal failure of one pipeline stage.

    The message names the stage so a caller can tell where the request broke
    without re-running it.
    """

    stage = "review"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.stage} failed: {message}")


class InputValidationError(ReviewError):
    stage = "input validation"


class DiffFetchError(ReviewError):
    stage = "diff fetch"


class ModelResponseError(ReviewError):
    stage = "model call"


class PostingError(ReviewError):
    stage = "review post"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
