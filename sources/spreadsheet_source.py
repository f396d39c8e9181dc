"""
Row source reading one sheet of an Excel workbook.

Reading pipeline:
    1. Resolve and validate the workbook file
    2. Load the workbook, locate the sheet
    3. Read the header row: infer a model or bind the explicit one
    4. Serve non-blank rows, converting each cell through its column parser

Classes:
    SpreadsheetRowSource: RowSource over an openpyxl worksheet
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Iterator, Optional

import openpyxl

from models.errors import (
    CellParseError,
    ConfigurationError,
    MissingHeaderError,
    RowShapeError,
    SheetNotFoundError,
    WorkbookOpenError,
)
from models.table_model import create_generic_string_model
from .base import RowSource, SourceKind
from .config import DEFAULT_KEY_COLUMN_INDEX
from .header_reader import (
    build_header_index,
    cell_to_text,
    is_blank_row,
    read_header_names,
    resolve_key_indices,
    trim_row,
)
from .resources import resolve_resource_path, validate_readable

# Suppress openpyxl warnings about styles/formatting (we only read data values)
warnings.filterwarnings('ignore', category=UserWarning, module='openpyxl')

logger = logging.getLogger(__name__)


@dataclass
class SheetCursor:
    """Everything a source holds while open: workbook handle and read position."""
    workbook: object
    rows: Iterator[tuple]
    position: int = 0
    exhausted: bool = False

    def next_physical_row(self):
        """
        Return (row_number, values) of the next physical row, or None.

        iter_rows pads every row to the sheet-wide max_column; values are
        trimmed back to the row's own width (up to its last non-empty cell).
        """
        if self.exhausted:
            return None
        values = next(self.rows, None)
        if values is None:
            self.exhausted = True
            return None
        self.position += 1
        return self.position, trim_row(values)

    def next_non_blank_row(self):
        while True:
            physical = self.next_physical_row()
            if physical is None:
                return None
            row_number, values = physical
            if not is_blank_row(values):
                return physical
            logger.debug(f"skipping blank row {row_number}")


class SpreadsheetRowSource(RowSource):
    """
    Sequential reader over one sheet of an .xlsx workbook.

    The first non-blank row is the header. Without an explicit model the
    header names become an all-text model keyed on column 0, or on the given
    key column names.

    Args:
        file_path: Workbook path (filesystem path or bundled resource)
        sheet_name: Name of the sheet to read
        model: Explicit TableModel (mutually exclusive with key_column_names)
        key_column_names: Names of key columns for an inferred model
        read_column_idxs: Must be None; column subsets aren't supported
        is_sorted: Must be True
        validate_lazily: False opens the workbook during construction

    Examples:
        >>> source = SpreadsheetRowSource('accounts.xlsx', 'Data')
        >>> source.open()
        >>> source.get_next_row()
        ['1', 'Alice', '10.5']
        >>> source.get_last_index()
        0
        >>> source.close()
    """

    kind = SourceKind.FILE

    def __init__(self, file_path, sheet_name, model=None, key_column_names=None,
                 read_column_idxs=None, is_sorted=True, validate_lazily=True):
        logger.debug(f"file_path -> {file_path}")
        logger.debug(f"sheet_name -> {sheet_name}")
        logger.debug(f"model -> {model}")
        logger.debug(f"key_column_names -> {key_column_names}")
        logger.debug(f"read_column_idxs -> {read_column_idxs}")
        logger.debug(f"is_sorted -> {is_sorted}, validate_lazily -> {validate_lazily}")

        if model is not None and key_column_names is not None:
            raise ConfigurationError("does not allow both model and key_column_names params")

        super().__init__(
            model=model,
            key_column_names=key_column_names,
            read_column_idxs=read_column_idxs,
            is_sorted=is_sorted,
            validate_lazily=validate_lazily,
        )
        self._file = resolve_resource_path(file_path)
        self._sheet_name = sheet_name
        self._cursor: Optional[SheetCursor] = None
        self._header_names = None
        self._header_index = None

        if not validate_lazily:
            if self._file is None:
                raise ConfigurationError(f"could not find file for file_path -> {file_path}")
            self.open()

    @property
    def file(self):
        return self._file

    @property
    def sheet_name(self):
        return self._sheet_name

    @property
    def uri(self):
        if self._file is None:
            return None
        return self._file.absolute().as_uri()

    @property
    def header_column_names(self):
        """Column names read from the header row (None until opened)."""
        return list(self._header_names) if self._header_names is not None else None

    @property
    def header_index(self):
        """Model column name -> header position (None until opened)."""
        return dict(self._header_index) if self._header_index is not None else None

    def get_model(self):
        """
        Return the bound model, opening the source to infer it if needed.

        Returns:
            TableModel
        """
        if self._model is None:
            self.open()
        return self._model

    def _describe_resource(self):
        path = self._file.absolute() if self._file is not None else None
        return f"{path}!{self._sheet_name}"

    # --- lifecycle hooks --------------------------------------------------

    def _do_open(self):
        if self._file is None:
            raise ConfigurationError(f"{self!r} has no file to open")
        validate_readable(self._file)

        try:
            workbook = openpyxl.load_workbook(self._file, data_only=True)
        except Exception as e:
            logger.error(f"couldn't load workbook {self._file}: {e}", exc_info=True)
            raise WorkbookOpenError(f"couldn't load workbook [{self._file}]: {e}") from e
        logger.info(f"workbook: {self._file.name}, sheets: {workbook.sheetnames}")

        if self._sheet_name not in workbook.sheetnames:
            logger.error(f"couldn't find sheet named: {self._sheet_name}")
            workbook.close()
            raise SheetNotFoundError(self._sheet_name, workbook.sheetnames)

        sheet = workbook[self._sheet_name]
        total_rows = sheet.max_row
        logger.info(f"Total rows in sheet '{self._sheet_name}' of {self._file.absolute()}: {total_rows}")

        cursor = SheetCursor(
            workbook=workbook,
            rows=sheet.iter_rows(min_row=1, max_row=total_rows,
                                 max_col=sheet.max_column, values_only=True),
        )
        try:
            self._bind_header(cursor)
        except Exception:
            workbook.close()
            raise
        self._cursor = cursor

    def _bind_header(self, cursor):
        header = cursor.next_non_blank_row()
        if header is None:
            raise MissingHeaderError(
                f"no header row in sheet '{self._sheet_name}' of [{self._file}]"
            )
        row_number, header_cells = header
        logger.info(f"header (row {row_number}) -> {list(header_cells)}")
        header_names = read_header_names(header_cells)

        if self._model is not None:
            self._header_index = build_header_index(header_names, self._model)
        else:
            if self._key_column_names is None:
                key_indices = [DEFAULT_KEY_COLUMN_INDEX]
            else:
                key_indices = resolve_key_indices(header_names, self._key_column_names)
            try:
                self._model = create_generic_string_model(
                    header_names, key_indices, name=self._sheet_name
                )
            except ValueError as e:
                raise ConfigurationError(
                    f"can't infer a model from header {header_names}: {e}"
                ) from e
            self._header_index = {
                name: position for position, name in enumerate(header_names) if name
            }
        self._header_names = header_names

    def _read_row(self):
        physical = self._cursor.next_non_blank_row()
        if physical is None:
            return None
        row_number, cells = physical
        return self._create_row(row_number, cells)

    def _create_row(self, row_number, cells):
        columns = self._model.columns
        if len(cells) != len(columns):
            raise RowShapeError(
                f"columnCount->{len(cells)} in row {row_number} -> {list(cells)} "
                f"does not match modelled table -> {self._model.column_names}",
                row_number=row_number,
            )
        row = []
        for column, value in zip(columns, cells):
            text = cell_to_text(value)
            try:
                row.append(column.parse(text))
            except (ValueError, TypeError) as e:
                logger.error(f"parse failure in {self!r}, row {row_number}, column '{column.name}': {e}")
                raise CellParseError(row_number, column.name, text, cause=e) from e
        return row

    def _do_close(self):
        cursor, self._cursor = self._cursor, None
        cursor.workbook.close()
        logger.debug(f"closed {self!r}")
