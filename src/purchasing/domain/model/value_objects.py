"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from purchasing.domain.exceptions import ValidationError

# Garment size buckets, in display order.
SIZE_LABELS: tuple[str, ...] = ("XS", "S", "M", "L", "XL", "2XL", "3XL")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors in order totals.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def divided_by(self, count: int) -> Money:
        """Even share of this amount, rounded to cents (used for averages)."""
        if count <= 0:
            return Money.zero(self.currency)
        return Money((self.amount / count).quantize(Decimal("0.01")), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    @staticmethod
    def sum_of(amounts: Iterable[Money]) -> Money:
        result = Money.zero()
        for amount in amounts:
            result = result + amount
        return result


@dataclass(frozen=True)
class SizeVector:
    """Quantities per garment size over the fixed ``SIZE_LABELS`` key set.

    Stored as a tuple aligned with ``SIZE_LABELS`` so that two vectors with
    the same quantities always compare equal.  Every quantity is a
    non-negative ``int``; unknown labels are rejected when the vector is
    built, never later when it is used.
    """

    quantities: tuple[int, ...] = (0,) * len(SIZE_LABELS)

    def __post_init__(self) -> None:
        if len(self.quantities) != len(SIZE_LABELS):
            raise ValidationError(
                f"Size vector needs {len(SIZE_LABELS)} quantities, "
                f"got {len(self.quantities)}"
            )
        for label, qty in zip(SIZE_LABELS, self.quantities):
            if isinstance(qty, bool) or not isinstance(qty, int):
                raise ValidationError(
                    f"Quantity for size {label} must be an integer, "
                    f"got {type(qty).__name__}"
                )
            if qty < 0:
                raise ValidationError(
                    f"Quantity for size {label} cannot be negative, got {qty}"
                )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(sizes: Mapping[str, int] | None = None) -> SizeVector:
        """Build from a ``{label: qty}`` mapping; missing labels default to 0."""
        sizes = dict(sizes or {})
        unknown = [label for label in sizes if label not in SIZE_LABELS]
        if unknown:
            raise ValidationError(f"Unknown size label(s): {', '.join(unknown)}")
        return SizeVector(tuple(sizes.get(label, 0) for label in SIZE_LABELS))

    @staticmethod
    def zero() -> SizeVector:
        return SizeVector()

    @staticmethod
    def sum_of(vectors: Iterable[SizeVector]) -> SizeVector:
        result = SizeVector.zero()
        for vector in vectors:
            result = result + vector
        return result

    # --- Element access -------------------------------------------------------

    def __getitem__(self, label: str) -> int:
        return self.quantities[_index_of(label)]

    def with_size(self, label: str, qty: int) -> SizeVector:
        """Return a copy with one bucket replaced."""
        values = list(self.quantities)
        values[_index_of(label)] = qty
        return SizeVector(tuple(values))

    def items(self) -> list[tuple[str, int]]:
        return list(zip(SIZE_LABELS, self.quantities))

    def to_dict(self) -> dict[str, int]:
        return dict(self.items())

    # --- Element-wise arithmetic ----------------------------------------------

    def __add__(self, other: SizeVector) -> SizeVector:
        return SizeVector(tuple(a + b for a, b in zip(self.quantities, other.quantities)))

    def __sub__(self, other: SizeVector) -> SizeVector:
        """Element-wise difference, clamped at zero per size."""
        return SizeVector(
            tuple(max(0, a - b) for a, b in zip(self.quantities, other.quantities))
        )

    def clamp(self, upper: SizeVector) -> SizeVector:
        """Element-wise minimum against *upper*."""
        return SizeVector(tuple(min(a, b) for a, b in zip(self.quantities, upper.quantities)))

    def exceeds(self, limit: SizeVector) -> list[str]:
        """Labels whose quantity is above the same bucket in *limit*."""
        return [
            label
            for label, a, b in zip(SIZE_LABELS, self.quantities, limit.quantities)
            if a > b
        ]

    # --- Aggregates -----------------------------------------------------------

    @property
    def total(self) -> int:
        return sum(self.quantities)

    @property
    def is_zero(self) -> bool:
        return self.total == 0

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        parts = [f"{label}:{qty}" for label, qty in self.items() if qty]
        return ", ".join(parts) if parts else "-"


def _index_of(label: str) -> int:
    try:
        return SIZE_LABELS.index(label)
    except ValueError:
        raise ValidationError(f"Unknown size label: {label!r}") from None
