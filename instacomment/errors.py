class CommentServiceError(Exception):
    """Base for failures that are reported to the client as a short message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingLinkError(CommentServiceError):
    status_code = 400

    def __init__(self, message: str = "Please enter a link."):
        super().__init__(message)


class InvalidLinkError(CommentServiceError):
    def __init__(self, message: str = "Not a valid Instagram post link."):
        super().__init__(message)


class FetchError(CommentServiceError):
    """The caption could not be retrieved."""


class FetchFailedError(FetchError):
    def __init__(self, message: str = "Could not retrieve caption: the page failed to load."):
        super().__init__(message)


class CaptionNotFoundError(FetchError):
    def __init__(self, message: str = "Could not retrieve caption: no caption found on the page."):
        super().__init__(message)


class GenerationError(CommentServiceError):
    def __init__(self, message: str = "Comment generation failed."):
        super().__init__(message)
