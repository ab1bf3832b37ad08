USER_FACING_MESSAGE = "Failed to parse recipe from the provided URL. Please try another recipe site."


class ExtractionFailure(Exception):
    error_code = "parse_failed"

    def __init__(self, message: str = USER_FACING_MESSAGE, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class FetchError(ExtractionFailure):
    def __init__(self, error_code: str, detail: str | None = None):
        super().__init__(USER_FACING_MESSAGE, detail)
        self.error_code = error_code
