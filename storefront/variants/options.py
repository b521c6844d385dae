"""Editing operations on a product's option axes.

Every function takes the current list of options and returns a new list; the
input is never mutated, so callers can diff old and new before reconciling.
"""
from typing import Dict, List, Optional

from pydantic_extra_types.color import Color

from storefront.models.common import LocalizedText
from storefront.models.product import OptionKind, VariantOption

PREDEFINED_OPTIONS = [
    {"kind": OptionKind.SIZE, "ar": "الحجم", "fr": "Taille", "placeholder": "مثال: S, M, L, XL"},
    {"kind": OptionKind.COLOR, "ar": "اللون", "fr": "Couleur", "placeholder": "مثال: أحمر, أزرق, أخضر"},
    {"kind": OptionKind.WEIGHT, "ar": "الوزن", "fr": "Poids", "placeholder": "مثال: 1kg, 500g, 250g"},
    {"kind": OptionKind.MATERIAL, "ar": "المادة", "fr": "Matériau", "placeholder": "مثال: قطن, جلد, معدن"},
    {"kind": OptionKind.CAPACITY, "ar": "السعة", "fr": "Capacité", "placeholder": "مثال: 1L, 500ml, 2L"},
]

COLOR_OPTION_NAMES = ("couleur", "color", "اللون")


def resolve_option_kind(name: LocalizedText) -> OptionKind:
    """Classifies an option from its name, once, when the name is entered."""
    fr = name.fr.strip().lower()
    ar = name.ar.strip().lower()
    if fr in COLOR_OPTION_NAMES or ar in COLOR_OPTION_NAMES:
        return OptionKind.COLOR
    for entry in PREDEFINED_OPTIONS:
        if entry["fr"].lower() == fr and entry["ar"] == name.ar.strip():
            return entry["kind"]
    return OptionKind.CUSTOM


def with_resolved_kinds(options: List[VariantOption]) -> List[VariantOption]:
    return [
        option.model_copy(update={"kind": resolve_option_kind(option.name)})
        for option in options
    ]


def find_predefined(fr_name: str) -> Optional[Dict]:
    return next((p for p in PREDEFINED_OPTIONS if p["fr"] == fr_name), None)


def _option_at(options: List[VariantOption], index: int) -> VariantOption:
    # Sin índices negativos: options[-1] no es una posición del editor
    if index < 0 or index >= len(options):
        raise IndexError(f"No option at position {index}")
    return options[index]


def add_option(options: List[VariantOption]) -> List[VariantOption]:
    return [*options, VariantOption()]


def remove_option(options: List[VariantOption], index: int) -> List[VariantOption]:
    _option_at(options, index)
    return [option for i, option in enumerate(options) if i != index]


def rename_option(
    options: List[VariantOption],
    index: int,
    ar: Optional[str] = None,
    fr: Optional[str] = None,
) -> List[VariantOption]:
    """Free-text rename of one or both locales."""
    option = _option_at(options, index)
    name = option.name.model_copy(
        update={k: v for k, v in (("ar", ar), ("fr", fr)) if v is not None}
    )
    renamed = option.model_copy(update={"name": name, "kind": resolve_option_kind(name)})
    return [renamed if i == index else o for i, o in enumerate(options)]


def choose_predefined_option(
    options: List[VariantOption], index: int, fr_name: str
) -> List[VariantOption]:
    """Sets both locales of an option from the predefined catalog."""
    entry = find_predefined(fr_name)
    if entry is None:
        raise ValueError(f"Unknown predefined option: {fr_name}")
    name = LocalizedText(ar=entry["ar"], fr=entry["fr"])
    chosen = _option_at(options, index).model_copy(update={"name": name, "kind": entry["kind"]})
    return [chosen if i == index else o for i, o in enumerate(options)]


def add_value(options: List[VariantOption], index: int, value: str) -> List[VariantOption]:
    value = (value or "").strip()
    option = _option_at(options, index)
    if not value or value in option.values:
        return list(options)
    updated = option.model_copy(update={"values": [*option.values, value]})
    return [updated if i == index else o for i, o in enumerate(options)]


def remove_value(options: List[VariantOption], index: int, value: str) -> List[VariantOption]:
    option = _option_at(options, index)
    updated = option.model_copy(update={"values": [v for v in option.values if v != value]})
    return [updated if i == index else o for i, o in enumerate(options)]


def is_color_value(value: str) -> bool:
    try:
        Color(value)
    except ValueError:
        return False
    return True


def swatch_hex(option: VariantOption, value: str) -> Optional[str]:
    """Hex code to paint a swatch with, or None when the value renders as a chip."""
    if option.kind != OptionKind.COLOR or not is_color_value(value):
        return None
    return Color(value).as_hex(format="long")
