from __future__ import annotations

"""
Internationalization (i18n) utility module for user-facing flash messages.

This module provides functionality for:
- Loading translations for the configured languages
- Translating message keys based on user preference
- Determining user language from query parameters or request headers
- Falling back to the raw ``.po`` catalogue when compiled ``.mo`` files are missing

Message keys (e.g. ``invalid_email_or_password``) are the gettext msgids.
"""

import gettext
import os
from typing import Dict, Optional

from starlette.requests import Request

from sessionauth.core.config.settings import settings
from sessionauth.core.logging import logger

_translations: Dict[str, gettext.NullTranslations] = {}

# The compiled *.mo* files are not shipped; gettext then returns the msgid and
# we look the key up in a catalogue parsed from the *.po* files instead.
_fallback_catalogs: Dict[str, Dict[str, str]] = {}

LOCALES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "locales"))


def setup_i18n() -> None:
    """
    Initialize the internationalization system by loading translations.

    Raises:
        FileNotFoundError: If the locales directory is not found.
    """
    if not os.path.exists(LOCALES_PATH):
        raise FileNotFoundError(f"Locales directory not found: {LOCALES_PATH}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = gettext.translation(
            domain="messages",
            localedir=LOCALES_PATH,
            languages=[lang],
            fallback=True,
        )

        po_path = os.path.join(LOCALES_PATH, lang, "LC_MESSAGES", "messages.po")
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            with open(po_path, "r", encoding="utf-8") as po_file:
                current_msgid: Optional[str] = None
                for raw_line in po_file:
                    line = raw_line.strip()
                    if line.startswith("msgid "):
                        current_msgid = line[6:].strip().strip('"')
                    elif line.startswith("msgstr ") and current_msgid is not None:
                        msgstr = line[7:].strip().strip('"')
                        catalog[current_msgid] = msgstr or current_msgid
                        current_msgid = None

        _fallback_catalogs[lang] = catalog
        logger.debug("i18n_initialized", language=lang, entries=len(catalog))

    logger.info("i18n_setup_complete", default_locale=settings.DEFAULT_LANGUAGE)


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Falls back to the default language, and finally to the key itself.

    Args:
        key: The message key to translate.
        locale: The target language code (defaults to DEFAULT_LANGUAGE).

    Returns:
        The translated message or the original key if translation fails.
    """
    if not _translations:
        setup_i18n()

    if locale not in _translations:
        logger.warning(
            "unsupported_locale_requested",
            requested_locale=locale,
            fallback_locale=settings.DEFAULT_LANGUAGE,
        )
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if not translation:
        logger.error("translation_missing_for_locale", locale=locale)
        return key

    translated = translation.gettext(key)
    if translated == key:
        translated = _fallback_catalogs.get(locale, {}).get(key, key)
        if translated == key:
            logger.warning("translation_key_not_found", key=key, locale=locale)

    return translated


def get_request_language(request: Request) -> str:
    """
    Determine the preferred language from a request.

    Checks the ``lang`` query parameter, then the Accept-Language header, then
    the default language from settings.

    Args:
        request: The incoming request.

    Returns:
        The determined language code.
    """
    lang = request.query_params.get("lang")
    if lang and lang in settings.SUPPORTED_LANGUAGES:
        return lang

    accept_language = request.headers.get("Accept-Language", settings.DEFAULT_LANGUAGE)
    for lang in accept_language.split(","):
        lang = lang.split(";")[0].strip().split("-")[0]
        if lang in settings.SUPPORTED_LANGUAGES:
            return lang

    return settings.DEFAULT_LANGUAGE
