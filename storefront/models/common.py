from typing import Literal

from pydantic import BaseModel

Locale = Literal["ar", "fr"]


class LocalizedText(BaseModel):
    ar: str = ""
    fr: str = ""

    def display(self, locale: str) -> str:
        # Un texto vacío en el idioma pedido cae al árabe
        value = getattr(self, locale, "") if locale in ("ar", "fr") else ""
        return value or self.ar

    def is_complete(self) -> bool:
        return bool(self.ar.strip()) and bool(self.fr.strip())
