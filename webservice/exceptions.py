class WebserviceError(Exception):
    """
    Base class for every error raised while talking to the Concerto API
    """


class CredentialLoadError(WebserviceError):
    """
    Client certificate or key missing, unreadable or not a valid pair
    """


class TransportError(WebserviceError):
    """
    Connection couldn't be established, was reset, or the body couldn't be
    fully read
    """


class HTTPStatusError(WebserviceError):
    """
    The API answered with a status code of 300 or above
    """

    def __init__(self, status_code, message):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP request failed: [{message}]")


class MissingFilenameError(WebserviceError):
    pass


class FileWriteError(WebserviceError):
    pass
