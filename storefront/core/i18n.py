# storefront/core/i18n.py
from typing import Dict

from storefront.core.config import settings

SUPPORTED_LOCALES = ("ar", "fr")

MESSAGES: Dict[str, Dict[str, str]] = {
    "ar": {
        "errors.nameAr": "الاسم بالعربية مطلوب",
        "errors.nameFr": "الاسم بالفرنسية مطلوب",
        "errors.descriptionAr": "الوصف بالعربية مطلوب",
        "errors.descriptionFr": "الوصف بالفرنسية مطلوب",
        "errors.price": "يجب أن يكون السعر أكبر من صفر",
        "errors.category": "يرجى اختيار فئة",
        "errors.mainImage": "الصورة الرئيسية مطلوبة",
        "errors.purchaseOptions": "يجب تفعيل خيار شراء واحد على الأقل",
        "errors.variants": "يرجى إكمال خيارات المنتج وأسعارها",
        "errors.customSection": "يرجى إكمال محتوى القسم",
        "errors.sectionTitle": "عنوان القسم مطلوب باللغتين",
        "errors.sectionProducts": "يرجى اختيار منتج واحد على الأقل",
        "checkout.formError": "معلومات ناقصة. يرجى التحقق من بيانات التوصيل.",
        "checkout.success": "🎉 تم تأكيد طلبكم! سنتواصل معكم قريباً لترتيب التوصيل.",
        "checkout.error": "خطأ في تأكيد الطلب. يرجى المحاولة مرة أخرى أو التواصل معنا.",
        "checkout.emptySelection": "لم يتم اختيار أي منتج في السلة",
        "checkout.paymentError": "فشل الدفع. يرجى المحاولة مرة أخرى.",
    },
    "fr": {
        "errors.nameAr": "Le nom en arabe est requis",
        "errors.nameFr": "Le nom en français est requis",
        "errors.descriptionAr": "La description en arabe est requise",
        "errors.descriptionFr": "La description en français est requise",
        "errors.price": "Le prix doit être supérieur à zéro",
        "errors.category": "Veuillez choisir une catégorie",
        "errors.mainImage": "L'image principale est requise",
        "errors.purchaseOptions": "Activez au moins une option d'achat",
        "errors.variants": "Veuillez compléter les options et les prix des variantes",
        "errors.customSection": "Veuillez compléter le contenu de la section",
        "errors.sectionTitle": "Le titre de la section est requis dans les deux langues",
        "errors.sectionProducts": "Veuillez choisir au moins un produit",
        "checkout.formError": "Informations incomplètes. Veuillez vérifier vos données de livraison.",
        "checkout.success": "🎉 Commande confirmée ! Nous vous contacterons sous peu pour organiser la livraison.",
        "checkout.error": "Erreur lors de la confirmation. Veuillez réessayer ou nous contacter.",
        "checkout.emptySelection": "Aucun article sélectionné dans le panier",
        "checkout.paymentError": "Le paiement a échoué. Veuillez réessayer.",
    },
}


def normalize_locale(locale: str = None) -> str:
    if locale in SUPPORTED_LOCALES:
        return locale
    return settings.default_locale


def t(key: str, locale: str = None) -> str:
    """Looks a message up, falling back to Arabic and then to the key."""
    table = MESSAGES[normalize_locale(locale)]
    if key in table:
        return table[key]
    return MESSAGES["ar"].get(key, key)
