"""
Error taxonomy shared by row sources and the relational helpers.

Hierarchy:
    RowSourceError
        ConfigurationError         - conflicting or unsupported construction arguments
            UnsupportedConfigurationError
            RowShapeError          - physical row width differs from the model
            KeyResolutionError     - key column name missing from the header
        ResourceError              - backing file/workbook/sheet problems
            WorkbookOpenError
            SheetNotFoundError
            MissingHeaderError
        SourceStateError           - read/close outside the open state
        CellParseError             - a cell's text rejected by its column parser
"""


class RowSourceError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(RowSourceError):
    pass


class UnsupportedConfigurationError(ConfigurationError, NotImplementedError):
    """A capability value that is accepted by the signature but not implemented."""


class RowShapeError(ConfigurationError):
    def __init__(self, message, row_number=None):
        self.row_number = row_number
        super().__init__(message)


class KeyResolutionError(ConfigurationError):
    pass


class ResourceError(RowSourceError):
    pass


class WorkbookOpenError(ResourceError):
    pass


class SheetNotFoundError(ResourceError):
    def __init__(self, sheet_name, available=None):
        self.sheet_name = sheet_name
        self.available = list(available or [])
        super().__init__(
            f"couldn't find sheet named '{sheet_name}' (available: {self.available})"
        )


class MissingHeaderError(ResourceError):
    pass


class SourceStateError(RowSourceError):
    pass


class CellParseError(RowSourceError):
    """
    Raised when a column parser rejects a cell.

    Attributes:
        row_number: 1-based physical row number in the sheet
        column_name: Name of the column whose parser failed
        text: Raw text handed to the parser
    """

    def __init__(self, row_number, column_name, text, cause=None):
        self.row_number = row_number
        self.column_name = column_name
        self.text = text
        message = f"can't parse '{text}' for column '{column_name}' at row {row_number}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
