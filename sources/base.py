"""
The sequential-read contract every row source implements.

A source moves through three states and never goes back:

    UNOPENED --open()--> OPEN --close()--> CLOSED

Rows are pulled one at a time with get_next_row() until it returns None.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from models.errors import SourceStateError, UnsupportedConfigurationError
from .config import SUPPORTED_IS_SORTED

logger = logging.getLogger(__name__)


class SourceState(Enum):
    UNOPENED = 'unopened'
    OPEN = 'open'
    CLOSED = 'closed'


class SourceKind(Enum):
    FILE = 'file'
    DB = 'db'
    MEMORY = 'memory'


class RowSource(ABC):
    """
    Pull-based provider of typed rows from one backing resource.

    Not safe for concurrent use: a single reader owns the cursor.

    Subclasses implement _do_open, _read_row and _do_close; the state
    transitions, the row cursor and the Python iteration protocol live here.
    """

    kind = SourceKind.FILE

    def __init__(self, model=None, key_column_names=None, read_column_idxs=None,
                 is_sorted=True, validate_lazily=True):
        self._model = model
        self._key_column_names = list(key_column_names) if key_column_names is not None else None
        self._read_column_idxs = read_column_idxs
        self._is_sorted = is_sorted
        self._validate_lazily = validate_lazily
        self._state = SourceState.UNOPENED
        self._last_index = -1
        self._negotiate_capabilities()

    def _negotiate_capabilities(self):
        if self._read_column_idxs is not None:
            raise UnsupportedConfigurationError(
                f"read_column_idxs->{self._read_column_idxs} is not currently supported"
            )
        if self._is_sorted != SUPPORTED_IS_SORTED:
            raise UnsupportedConfigurationError(
                f"is_sorted->{self._is_sorted} is not currently supported"
            )

    # --- lifecycle -------------------------------------------------------

    @property
    def state(self):
        return self._state

    @property
    def is_open(self):
        return self._state is SourceState.OPEN

    def open(self):
        """Open the source; a no-op when already open."""
        if self._state is SourceState.OPEN:
            return
        if self._state is SourceState.CLOSED:
            raise SourceStateError(f"{self!r} is closed and can't be reopened")
        self._do_open()
        self._state = SourceState.OPEN

    def close(self):
        self._ensure_open()
        try:
            self._do_close()
        finally:
            self._state = SourceState.CLOSED

    def get_next_row(self):
        """
        Return the next logical row, or None once the data is exhausted.

        Returns:
            list: Typed values, one per model column
        """
        self._ensure_open()
        row = self._read_row()
        if row is None:
            return None
        self._last_index += 1
        return row

    def get_last_index(self):
        return self._last_index

    def _ensure_open(self):
        if self._state is not SourceState.OPEN:
            raise SourceStateError(f"{self!r} is not open (state: {self._state.value})")

    @abstractmethod
    def _do_open(self):
        pass

    @abstractmethod
    def _read_row(self):
        """Read and convert the next logical row, or return None at end of data."""

    @abstractmethod
    def _do_close(self):
        pass

    @abstractmethod
    def get_model(self):
        pass

    # --- capabilities ----------------------------------------------------

    @property
    def key_column_names(self):
        return self._key_column_names

    @property
    def read_column_idxs(self):
        return self._read_column_idxs

    @property
    def is_sorted(self):
        return self._is_sorted

    @property
    def validate_lazily(self):
        return self._validate_lazily

    @property
    @abstractmethod
    def uri(self):
        pass

    # --- Python protocols ------------------------------------------------

    def __iter__(self):
        self.open()
        while True:
            row = self.get_next_row()
            if row is None:
                return
            yield row

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.is_open:
            self.close()
        return False

    def __repr__(self):
        return f"{type(self).__name__}@{id(self):x}[{self._describe_resource()}]"

    def _describe_resource(self):
        return ''
