class HTMLWidgetsError(Exception):
    """Base exception for htmlwidgets errors."""
    pass


class AddressError(HTMLWidgetsError):
    """Raised when a dotted path can't be resolved in the form data."""

    def __init__(self, message, path=None, segment=None):
        super().__init__(message)
        self.path = path
        self.segment = segment


class ConfigurationError(HTMLWidgetsError):
    """
    Raised when the registered widgets don't match the shape of the data.

    This is a setup defect, never a user input error.
    """

    def __init__(self, message, widget_id=None):
        super().__init__(message)
        self.widget_id = widget_id
