"""Document model entities for ledgerparse.

These are pure data classes representing the constructs of a ledger
journal, independent of how they were written in the source text. The
parser builds the whole tree in one pass and the serializer only reads it,
so every entity is frozen and collections are tuples.
"""

import datetime as dt
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionStatus(Enum):
    """Clearing state of a transaction or posting."""

    PENDING = "!"
    CLEARED = "*"


class Reality(Enum):
    """Whether a posting hits a real or a virtual account."""

    REAL = "real"
    BALANCED_VIRTUAL = "balanced_virtual"
    UNBALANCED_VIRTUAL = "unbalanced_virtual"


class CommodityPosition(Enum):
    """Side of the quantity the commodity symbol is written on."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Commodity:
    """Commodity symbol with its position relative to the quantity."""

    name: str
    position: CommodityPosition


@dataclass(frozen=True)
class Amount:
    """Exact quantity of a commodity."""

    quantity: Decimal
    commodity: Commodity


@dataclass(frozen=True)
class UnitPrice:
    """Cost or rate per unit (`{a}` lot price or `@ a` price)."""

    amount: Amount


@dataclass(frozen=True)
class TotalPrice:
    """Cost or rate for the whole posting (`{{a}}` or `@@ a`)."""

    amount: Amount


Price = Union[UnitPrice, TotalPrice]


@dataclass(frozen=True)
class ZeroBalance:
    """Balance assertion written as a bare `0`."""


@dataclass(frozen=True)
class AmountBalance:
    amount: Amount


Balance = Union[ZeroBalance, AmountBalance]


@dataclass(frozen=True)
class PostingAmount:
    """Amount of a posting with optional lot price and price annotations."""

    amount: Amount
    lot_price: Optional[Price] = None
    price: Optional[Price] = None


TagValue = Union[str, int, float, dt.date]


@dataclass(frozen=True)
class Tag:
    """Metadata tag; a tag without a value acts as a boolean marker."""

    name: str
    value: Optional[TagValue] = None

    def __post_init__(self):
        if isinstance(self.value, float) and math.isnan(self.value):
            raise ValueError(f"Tag '{self.name}' cannot have a NaN value")


@dataclass(frozen=True)
class PostingMetadata:
    """Dates and tags declared in comments under a header or posting."""

    date: Optional[dt.date] = None
    effective_date: Optional[dt.date] = None
    tags: tuple[Tag, ...] = ()


@dataclass(frozen=True)
class Posting:
    """One account line within a transaction."""

    account: str
    reality: Reality = Reality.REAL
    amount: Optional[PostingAmount] = None
    balance: Optional[Balance] = None
    status: Optional[TransactionStatus] = None
    comment: Optional[str] = None
    metadata: PostingMetadata = field(default_factory=PostingMetadata)

    @property
    def is_elided(self) -> bool:
        """True when the amount is implied by the other postings."""
        return self.amount is None and self.balance is None


@dataclass(frozen=True)
class Transaction:
    """Dated transaction with its postings."""

    date: dt.date
    postings: tuple[Posting, ...]
    effective_date: Optional[dt.date] = None
    status: Optional[TransactionStatus] = None
    code: Optional[str] = None
    description: str = ""
    comment: Optional[str] = None
    metadata: PostingMetadata = field(default_factory=PostingMetadata)


@dataclass(frozen=True)
class CommodityPrice:
    """Point-in-time price of a commodity (`P` directive)."""

    datetime: dt.datetime
    commodity_name: str
    amount: Amount


@dataclass(frozen=True)
class EmptyLine:
    pass


@dataclass(frozen=True)
class LineComment:
    """Free-standing comment line outside any transaction."""

    text: str


@dataclass(frozen=True)
class Include:
    """Include directive; recorded, never resolved."""

    path: str


Item = Union[EmptyLine, LineComment, Transaction, CommodityPrice, Include]


@dataclass(frozen=True)
class Document:
    """Ordered sequence of top-level ledger items."""

    items: tuple[Item, ...] = ()

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(i for i in self.items if isinstance(i, Transaction))

    @property
    def commodity_prices(self) -> tuple[CommodityPrice, ...]:
        return tuple(i for i in self.items if isinstance(i, CommodityPrice))

    @property
    def includes(self) -> tuple[Include, ...]:
        return tuple(i for i in self.items if isinstance(i, Include))
