from typing import Dict, List

from storefront.models.product import VariantOption

Combination = Dict[str, str]


def generate_combinations(options: List[VariantOption]) -> List[Combination]:
    """
    Expands option axes into every concrete combination, keyed by the French
    option name. The first axis changes slowest and the last one fastest.
    An empty option list, or any axis without values, yields no combinations.
    """
    if not options or any(not option.values for option in options):
        return []

    combinations: List[Combination] = [{}]
    for option in options:
        combinations = [
            {**combination, option.key: value}
            for combination in combinations
            for value in option.values
        ]
    return combinations


def combination_id(combination: Combination, separator: str = "-") -> str:
    return separator.join(combination.values())
