import logging
from typing import List, Optional, Set

from storefront.models.product import Variant, VariantOption
from storefront.variants.combinations import (
    Combination,
    combination_id,
    generate_combinations,
)

logger = logging.getLogger(__name__)


def _find_same_combination(
    combination: Combination, variants: List[Variant]
) -> Optional[Variant]:
    return next((v for v in variants if v.options == combination), None)


def _unique_id(base: str, taken: Set[str]) -> str:
    """`base`, or `base#2`, `base#3`... when values containing "-" collide."""
    candidate, n = base, 2
    while candidate in taken:
        candidate = f"{base}#{n}"
        n += 1
    return candidate


def reconcile_variants(
    options: List[VariantOption],
    previous: List[Variant],
    has_variants: bool = True,
) -> List[Variant]:
    """
    Rebuilds the variant list after the option axes changed.

    Combinations that already existed keep their id, prices, activity flag and
    images. New combinations start at price 0, active, without images.
    Variants whose combination disappeared are dropped. Ids are unique
    within the returned list.
    """
    if not has_variants:
        return []

    combinations = generate_combinations(options)
    matches = [_find_same_combination(c, previous) for c in combinations]

    # Los ids conservados se reservan antes de asignar ids nuevos
    taken: Set[str] = set()
    kept_ids: List[Optional[str]] = []
    for existing in matches:
        if existing is not None and existing.id and existing.id not in taken:
            taken.add(existing.id)
            kept_ids.append(existing.id)
        else:
            kept_ids.append(None)

    reconciled = []
    for combination, existing, kept_id in zip(combinations, matches, kept_ids):
        variant_id = kept_id or _unique_id(combination_id(combination), taken)
        taken.add(variant_id)
        if existing is not None:
            reconciled.append(
                Variant(
                    id=variant_id,
                    options=dict(combination),
                    price=existing.price,
                    original_price=existing.original_price,
                    is_active=existing.is_active,
                    images=list(existing.images),
                )
            )
        else:
            reconciled.append(Variant(id=variant_id, options=dict(combination)))

    dropped = [v for v in previous if _find_same_combination(v.options, reconciled) is None]
    if dropped:
        logger.debug("Dropped %s variants no longer produced by the options", len(dropped))
    return reconciled
