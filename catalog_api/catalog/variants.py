"""Variant generation from option/feature selections.

A product's variants are combinations of one feature per selected option.
The generator pre-populates every combination (the Cartesian product of the
selected options' features, in selection order); admins then edit prices and
stock, remove rows or add single combinations by hand.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from catalog_api.domain.exceptions import (
    DuplicateVariantError,
    InvalidCombinationError,
    NoOptionsSelectedError,
    VariantsAlreadyExistError,
)


@dataclass(frozen=True)
class OptionChoice:
    """A selected option and the ids of its features, in display order."""

    option_id: int
    name: str
    feature_ids: tuple[int, ...]


@dataclass
class VariantDraft:
    """Variant row before it is persisted."""

    feature_ids: list[int]
    price: float
    stock: int = 0


def generate_combinations(feature_sets: Sequence[Sequence[int]]) -> list[tuple[int, ...]]:
    """Cartesian product of feature id sets, preserving their order.

    Starts from a single empty combination and, for each set in turn,
    extends every combination so far with each feature of the set.

    Example:
        >>> generate_combinations([[1, 2], [10, 20, 30]])
        [(1, 10), (1, 20), (1, 30), (2, 10), (2, 20), (2, 30)]
    """
    if not feature_sets:
        return []

    combinations: list[tuple[int, ...]] = [()]
    for features in feature_sets:
        combinations = [combo + (feature_id,) for combo in combinations for feature_id in features]
    return combinations


@dataclass
class VariantDraftSet:
    """Editable list of variant drafts for a product being created.

    Attributes:
        options: Selected options with their features, in selection order.
        base_price: Product base price; default price of new drafts.
        variants: Current drafts.
    """

    options: Sequence[OptionChoice]
    base_price: float
    variants: list[VariantDraft] = field(default_factory=list)

    def _require_options(self) -> None:
        if not self.options:
            raise NoOptionsSelectedError()

    def generate_all(self) -> list[VariantDraft]:
        """Replace the (empty) draft list with every combination.

        Raises:
            NoOptionsSelectedError: If no option is selected.
            VariantsAlreadyExistError: If drafts already exist.
        """
        self._require_options()
        if self.variants:
            raise VariantsAlreadyExistError(len(self.variants))

        combinations = generate_combinations([o.feature_ids for o in self.options])
        self.variants = [
            VariantDraft(feature_ids=list(combo), price=self.base_price, stock=0)
            for combo in combinations
        ]
        return self.variants

    def normalize_combination(self, feature_ids: Sequence[int]) -> list[int]:
        """Order a combination by option and check it picks one feature per option.

        Raises:
            NoOptionsSelectedError: If no option is selected.
            InvalidCombinationError: If an option is missing, repeated, or a
                feature does not belong to any selected option.
        """
        self._require_options()
        owner = {
            feature_id: option.option_id
            for option in self.options
            for feature_id in option.feature_ids
        }

        picked: dict[int, int] = {}
        for feature_id in feature_ids:
            option_id = owner.get(feature_id)
            if option_id is None:
                raise InvalidCombinationError(list(feature_ids), f"unknown feature {feature_id}")
            if option_id in picked:
                raise InvalidCombinationError(list(feature_ids), f"option {option_id} repeated")
            picked[option_id] = feature_id

        missing = [o.option_id for o in self.options if o.option_id not in picked]
        if missing:
            raise InvalidCombinationError(list(feature_ids), f"missing options {missing}")

        return [picked[o.option_id] for o in self.options]

    def add(
        self,
        feature_ids: Sequence[int],
        price: float | None = None,
        stock: int | None = None,
    ) -> VariantDraft:
        """Add one hand-picked combination.

        Raises:
            InvalidCombinationError: See :meth:`normalize_combination`.
            DuplicateVariantError: If the combination is already drafted.
        """
        combo = self.normalize_combination(feature_ids)
        if any(sorted(v.feature_ids) == sorted(combo) for v in self.variants):
            raise DuplicateVariantError(combo)

        draft = VariantDraft(
            feature_ids=combo,
            price=price or self.base_price,
            stock=stock or 0,
        )
        self.variants.append(draft)
        return draft

    def update(self, index: int, price: float | None = None, stock: int | None = None) -> VariantDraft:
        """Change price and/or stock of one draft."""
        draft = self.variants[index]
        if price is not None:
            draft.price = price
        if stock is not None:
            draft.stock = stock
        return draft

    def remove(self, index: int) -> VariantDraft:
        """Remove one draft."""
        return self.variants.pop(index)

    def clear(self) -> None:
        """Drop every draft so the set can be regenerated."""
        self.variants = []

    @property
    def combination_count(self) -> int:
        """Number of combinations the selected options can produce."""
        if not self.options:
            return 0
        count = 1
        for option in self.options:
            count *= len(option.feature_ids)
        return count
