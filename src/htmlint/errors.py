class HtmlintError(Exception):
    """Base class for failures that are not lint findings."""


class DocumentParseError(HtmlintError):
    """Raised when a source unit cannot be decoded or tokenized as HTML."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")
