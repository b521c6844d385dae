# storefront/services/validation.py
from typing import Dict

from storefront.core.i18n import t
from storefront.models.product import ProductForm
from storefront.models.section import SectionCreate

ValidationErrors = Dict[str, str]

# Tipos de sección que muestran un título al cliente
TITLED_SECTIONS = ("hero", "banner", "featured", "popular", "landing-page")


def validate_product_form(form: ProductForm, is_new: bool, locale: str = None) -> ValidationErrors:
    """
    Valida el formulario completo de producto.
    Devuelve un diccionario campo -> mensaje; vacío si es válido.
    """
    errors: ValidationErrors = {}

    # Campos básicos
    if not form.name.ar.strip():
        errors["nameAr"] = t("errors.nameAr", locale)
    if not form.name.fr.strip():
        errors["nameFr"] = t("errors.nameFr", locale)
    if not form.description.ar.strip():
        errors["descriptionAr"] = t("errors.descriptionAr", locale)
    if not form.description.fr.strip():
        errors["descriptionFr"] = t("errors.descriptionFr", locale)

    # El precio sólo cuenta cuando no hay variantes
    if not form.has_variants and (not form.price or form.price <= 0):
        errors["price"] = t("errors.price", locale)

    if not form.category_id:
        errors["categoryId"] = t("errors.category", locale)

    # Imagen principal sólo obligatoria en productos nuevos
    if is_new and form.main_image is None:
        errors["mainImage"] = t("errors.mainImage", locale)

    if not form.allow_direct_purchase and not form.allow_add_to_cart:
        errors["purchaseOptions"] = t("errors.purchaseOptions", locale)

    if form.has_variants:
        if any(not o.name.is_complete() for o in form.variant_options):
            errors["variants"] = t("errors.variants", locale)
        if not form.variant_options or any(not o.values for o in form.variant_options):
            errors["variants"] = t("errors.variants", locale)
        if any(v.price <= 0 for v in form.variants):
            errors["variants"] = t("errors.variants", locale)

    if form.has_custom_sections:
        for index, section in enumerate(form.custom_sections):
            incomplete = not section.name.is_complete()
            if section.type == "description" and not section.description.is_complete():
                incomplete = True
            if section.type == "products" and not section.product_ids:
                incomplete = True
            if incomplete:
                errors[f"customSection{index}"] = t("errors.customSection", locale)

    return errors


def validate_section(section: SectionCreate, locale: str = None) -> ValidationErrors:
    errors: ValidationErrors = {}
    data = section.data

    if section.type in TITLED_SECTIONS and (data.title is None or not data.title.is_complete()):
        errors["title"] = t("errors.sectionTitle", locale)

    if section.type == "landing-page" and not data.cta_product_ids:
        errors["ctaProductIds"] = t("errors.sectionProducts", locale)

    return errors
