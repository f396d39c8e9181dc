"""Tags selecting how relational values are read from rows and written as SQL literals."""

from enum import Enum

from models.errors import ConfigurationError


class ReadKind(Enum):
    OBJECT = 'object'
    STRING = 'string'
    TEXT = 'text'


class WriteKind(Enum):
    NUMBER = 'number'
    STRING = 'string'
    DATE = 'date'
    TIME = 'time'


def coerce_kind(kind_cls, kind):
    """
    Accept an enum member or its value ('object', 'NUMBER', ...).

    Raises:
        ConfigurationError: For anything that isn't a known kind
    """
    if isinstance(kind, kind_cls):
        return kind
    if isinstance(kind, str):
        try:
            return kind_cls(kind.lower())
        except ValueError:
            pass
    raise ConfigurationError(f"unrecognized {kind_cls.__name__}->{kind!r}")
