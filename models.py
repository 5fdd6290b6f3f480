"""
Data models for the Console Inventory client
Defines entities, list queries and paginated results
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar, Union


READ_ONLY_FIELDS = ("id", "created_at", "updated_at")


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an ISO timestamp as sent by the backend

    Args:
        value (str): ISO 8601 timestamp, possibly ending in "Z"

    Returns:
        Optional[datetime]: Parsed timestamp, or None for an empty value
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class Entity:
    """
    Base class for all entities. Provides common attributes and methods for
    serialization
    Timestamps are kept as the ISO strings the backend sent
    """

    id: Optional[str] = None
    name: str = ""
    created_at: str = ""
    updated_at: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def created_datetime(self) -> Optional[datetime]:
        """
        Get the creation timestamp of the entity

        Returns:
            Optional[datetime]: Creation timestamp, None if not set yet
        """
        return parse_timestamp(self.created_at)

    @property
    def updated_datetime(self) -> Optional[datetime]:
        """
        Get the modification timestamp of the entity

        Returns:
            Optional[datetime]: Modification timestamp, None if not set yet
        """
        return parse_timestamp(self.updated_at)

    def to_json(self) -> Dict[str, object]:
        """
        Convert the entity to a JSON-serializable dictionary of domain fields

        Returns:
            Dict: JSON representation of the entity, without unset and extra fields
        """
        result: Dict[str, object] = {}
        for item in fields(self):
            if item.name == "extra":
                continue
            value = getattr(self, item.name)
            if value is not None:
                result[item.name] = value
        return result

    def from_json(self, data: Dict[str, object]) -> None:
        """
        Populate the entity's attributes from a dictionary of domain fields

        Args:
            data (Dict[str, object]): Dictionary keyed by attribute name
        """
        known = {item.name for item in fields(self)}
        for key, value in data.items():
            if key in known:
                setattr(self, key, value)
            else:
                raise ValueError(
                    f"Invalid attribute {key} for {self.__class__.__name__}"
                )


@dataclass
class Console(Entity):
    """
    Represents a hardware console of the inventory
    """

    manufacturer: str = ""
    serial_number: str = ""
    active: bool = False

    def __hash__(self) -> int:
        return hash(self.id)


class SortOrder(Enum):
    """
    Sort direction accepted by the list endpoint
    """

    ASC = "asc"
    DESC = "desc"


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


@dataclass(frozen=True)
class ListQuery:
    """
    Parameters of a single list call

    Attributes:
        page (int): Page number, starting at 1
        limit (int): Items per page
        is_active (Optional[bool]): True for active only, False for inactive only,
            None to rely on include_inactive
        include_inactive (bool): Whether inactive consoles are listed when
            is_active is None
        sort_by (Optional[str]): Field to sort on
        sort_order (Optional[SortOrder]): Sort direction
        search (Optional[str]): Free text search term
    """

    page: int = 1
    limit: int = 10
    is_active: Optional[bool] = None
    include_inactive: bool = False
    sort_by: Optional[str] = None
    sort_order: Optional[Union[SortOrder, str]] = None
    search: Optional[str] = None

    def __post_init__(self) -> None:
        if not _is_positive_int(self.page):
            raise ValueError(f"page must be an integer >= 1, got {self.page!r}")
        if not _is_positive_int(self.limit):
            raise ValueError(f"limit must be an integer >= 1, got {self.limit!r}")
        if self.sort_order is not None and not isinstance(self.sort_order, SortOrder):
            try:
                order = SortOrder(str(self.sort_order).lower())
            except ValueError as exc:
                raise ValueError(
                    f"sort_order must be 'asc' or 'desc', got {self.sort_order!r}"
                ) from exc
            object.__setattr__(self, "sort_order", order)


@dataclass
class PageMeta:
    """
    Pagination metadata, passed through from the backend as is
    """

    total: int = 0
    per_page: int = 0
    current_page: int = 1
    last_page: int = 1
    first_page: int = 1
    first_page_url: Optional[str] = None
    last_page_url: Optional[str] = None
    next_page_url: Optional[str] = None
    prev_page_url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "PageMeta":
        """
        Build the metadata from the backend "meta" object
        Unknown keys are kept under "extra"

        Args:
            data (Optional[Dict[str, Any]]): Backend metadata

        Returns:
            PageMeta: Metadata instance
        """
        known = {item.name for item in fields(cls)} - {"extra"}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key in known:
                values[key] = value
            else:
                extra[key] = value
        return cls(**values, extra=extra)


T = TypeVar("T", bound=Entity)


@dataclass
class PageResult(Generic[T]):
    """
    One page of entities plus its pagination metadata
    """

    items: List[T]
    meta: PageMeta

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)
