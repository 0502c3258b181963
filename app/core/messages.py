"""Localized user-facing error messages keyed by error code."""

from app.config import settings

SUPPORTED_LOCALES = ("en", "tr")

MESSAGES: dict[str, dict[str, str]] = {
    "TENANT_REQUIRED": {
        "en": "Tenant ID is required. Send the X-Tenant-ID header or sign in.",
        "tr": "Tenant ID gerekli. Lütfen x-tenant-id header'ını ekleyin veya giriş yapın.",
    },
    "TOKEN_REQUIRED": {
        "en": "Access denied. A token is required.",
        "tr": "Erişim reddedildi. Token gerekli.",
    },
    "INVALID_TOKEN": {"en": "Invalid token", "tr": "Geçersiz token"},
    "TOKEN_EXPIRED": {"en": "Token has expired", "tr": "Token süresi dolmuş"},
    "USER_NOT_FOUND": {
        "en": "Invalid token. User not found.",
        "tr": "Geçersiz token. Kullanıcı bulunamadı.",
    },
    "INVALID_CREDENTIALS": {
        "en": "Invalid email or password",
        "tr": "Geçersiz email veya şifre",
    },
    "AUTH_REQUIRED": {"en": "Authentication required", "tr": "Authentication gerekli"},
    "UNAUTHORIZED": {"en": "Authentication failed", "tr": "Kimlik doğrulama başarısız"},
    "TENANT_INACTIVE": {
        "en": "Tenant account is not active.",
        "tr": "Tenant hesabı aktif değil.",
    },
    "INSUFFICIENT_PERMISSIONS": {
        "en": "You are not allowed to perform this operation",
        "tr": "Bu işlem için yetkiniz bulunmuyor",
    },
    "FORBIDDEN": {"en": "Access denied", "tr": "Erişim reddedildi"},
    "TEMPLATE_NOT_FOUND": {"en": "Template not found", "tr": "Template bulunamadı"},
    "BUSINESS_TYPE_NOT_FOUND": {
        "en": "Business type not found",
        "tr": "Business type bulunamadı",
    },
    "NOT_FOUND": {"en": "Record not found", "tr": "Kayıt bulunamadı"},
    "DUPLICATE_RULE_NAME": {
        "en": "A pricing rule with this name already exists for the business type",
        "tr": "Bu business type için aynı isimde pricing rule zaten mevcut",
    },
    "CONFLICT": {"en": "This record already exists", "tr": "Bu veri zaten mevcut"},
    "VALIDATION_ERROR": {"en": "Validation error", "tr": "Validation hatası"},
    "DATABASE_ERROR": {"en": "A database error occurred", "tr": "Veritabanı hatası oluştu"},
    "INTERNAL_ERROR": {"en": "An internal server error occurred", "tr": "Sunucu hatası oluştu"},
}


def resolve_locale(accept_language: str | None) -> str:
    """Pick the first supported language from an Accept-Language header."""
    if accept_language:
        for part in accept_language.split(","):
            language = part.split(";")[0].strip().lower()[:2]
            if language in SUPPORTED_LOCALES:
                return language
    return settings.DEFAULT_LOCALE


def get_message(code: str, locale: str) -> str:
    translations = MESSAGES.get(code) or MESSAGES["INTERNAL_ERROR"]
    return translations.get(locale) or translations["en"]
