from typing import Any, Literal, Mapping, Sequence, TypeVar, Union

# Type aliases for better clarity
Record = Any
FieldPath = str
Direction = Literal["asc", "desc"]
OrderingPair = tuple[str, str]
OrderingInput = Union[str, Mapping[str, str], Sequence[Union[str, OrderingPair]]]
FilterSpec = dict[str, Any]
SortSpec = list[tuple[str, int]]

# Generic type variable for records
T = TypeVar("T")

# Constants
DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_PAGE_SIZE = 100
TOKEN_DELIMITER = "_"
