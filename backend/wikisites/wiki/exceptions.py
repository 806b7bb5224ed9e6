class RemoteWikiError(Exception):
    """Raised when the remote wiki cannot serve a request."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code
