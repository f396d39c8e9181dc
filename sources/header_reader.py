"""
Header and cell handling for spreadsheet row sources.

The first non-blank physical row of a sheet is its header. Its cells either
name the columns of an inferred model or are matched against the names of an
explicit one.

    Row 1:  id     name     amount     <- HEADER
    Row 2:  1      Alice    10.5
    Row 3:                             <- blank, skipped
    Row 4:  2      Bob      7

Functions:
    cell_to_text: Convert a raw cell value into the text handed to a parser
    is_blank_row: Check whether every cell of a row is empty or whitespace
    trim_row: Cut a physical row back to its last non-empty cell
    read_header_names: Turn header cells into column names
    resolve_key_indices: Map key column names onto header positions
    build_header_index: Map header names to their positions
"""

import logging
import numbers
from decimal import Decimal

from models.errors import KeyResolutionError

logger = logging.getLogger(__name__)


def cell_to_text(value):
    """
    Convert a cell value into parser input.

    Numbers become their decimal text, everything else uses its natural
    string form. Empty cells stay None.

    Examples:
        >>> cell_to_text(42)
        '42'
        >>> cell_to_text(10.5)
        '10.5'
        >>> cell_to_text(None) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, numbers.Real):
        text = str(value)
        # Keep very small/large floats out of exponent notation
        if 'e' in text or 'E' in text:
            text = format(Decimal(text), 'f')
        return text
    return str(value)


def is_blank_row(values):
    """
    Check if every cell in a physical row is empty or whitespace-only.

    Examples:
        >>> is_blank_row((None, '  ', ''))
        True
        >>> is_blank_row((None, 0))
        False
    """
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return False
    return True


def trim_row(values):
    """
    Cut a physical row back to its own width: everything up to its last non-None cell.

    Examples:
        >>> trim_row((1, None, 'a', None, None))
        (1, None, 'a')
        >>> trim_row((None, None))
        ()
    """
    width = len(values)
    while width and values[width - 1] is None:
        width -= 1
    return tuple(values[:width])


def read_header_names(header_cells):
    """
    Convert header cells into column names.

    A missing header cell yields an empty name and an error in the log; the
    header is still built so the rest of the row can be used.

    Args:
        header_cells: Raw values of the header row

    Returns:
        list of str
    """
    names = []
    for position, value in enumerate(header_cells):
        text = cell_to_text(value)
        if text is None or not text.strip():
            logger.error(f"no header for header index: {position}")
            names.append('')
            continue
        names.append(text.strip())
    logger.debug(f"header names -> {names}")
    return names


def resolve_key_indices(header_names, key_column_names):
    """
    Resolve key column names to their positions in the header.

    Args:
        header_names: Column names read from the header row
        key_column_names: Names of the key columns, in key order

    Returns:
        list of int: Header positions in the order of key_column_names

    Raises:
        KeyResolutionError: If a name is not present in the header

    Examples:
        >>> resolve_key_indices(['id', 'name', 'amount'], ['amount', 'id'])
        [2, 0]
    """
    if key_column_names is None:
        return None
    indices = []
    for key_name in key_column_names:
        try:
            indices.append(list(header_names).index(key_name))
        except ValueError:
            raise KeyResolutionError(
                f"no value in header {list(header_names)} for key column '{key_name}'"
            ) from None
    return indices


def build_header_index(header_names, model):
    """
    Map each model column name to its position in the header.

    Columns the header doesn't mention are logged and left out of the lookup;
    rows are still read positionally.

    Returns:
        dict: column name -> header position
    """
    positions = {}
    for position, name in enumerate(header_names):
        if name and name not in positions:
            positions[name] = position

    header_index = {}
    for column in model.columns:
        if column.name in positions:
            header_index[column.name] = positions[column.name]
        else:
            logger.warning(f"column '{column.name}' of model {model.name} not found in header")
    return header_index
