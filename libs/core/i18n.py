from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

# libs/core/i18n.py -> project_root/config/i18n
CATALOGUE_DIR = Path(__file__).resolve().parents[2] / "config" / "i18n"

# Built-in English replies used when the YAML catalogue is missing from the
# runtime image or lacks a key.
MESSAGES: Dict[str, str] = {
    "event_created": (
        "🎉 New event created!\n\n"
        "📝 Please send me the title for your event gallery:\n"
        "(What should appear at the top of the page?)"
    ),
    "title_set": (
        "✅ Title set: \"{title}\"\n\n"
        "📄 Now please send me a description for your event:\n"
        "(What should appear below the title?)"
    ),
    "description_set": (
        "✅ Description set!\n\n"
        "📁 Now you can:\n"
        "• Send photos/videos directly (high quality)\n"
        "• Send documents (files) for best quality\n"
        "• Or send file URLs from cloud storage\n\n"
        "✅ Send /done when finished"
    ),
    "progress": "📊 Upload Progress:\n✅ Successful: {success}\n❌ Failed: {failed}",
    "final_summary": "📊 Final Upload Summary:\n✅ Successful: {success}\n❌ Failed: {failed}",
    "event_ready": "✅ Your event \"{title}\" is ready!\n\n🔗 Share: {link}",
    "item_failed": "⚠️ Could not add this item: {reason}",
    "expect_start": "Send /start to create a new event gallery.",
    "expect_title": "Please send the title for your event as a text message.",
    "expect_description": "Please send the description for your event as a text message.",
    "expect_media": "Send photos, videos, documents or cloud links. Send /done when finished.",
}


def _read_catalogue(path: Path) -> Dict[str, str]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items()}


class I18n:
    """Reply templates for one language.

    A key is looked up in the language's YAML file, then in the English one,
    then in :data:`MESSAGES`; unknown keys come back unchanged.
    """

    def __init__(self, lang: str, base_dir: Path = CATALOGUE_DIR) -> None:
        self.lang = (lang or "en").lower()
        english = _read_catalogue(base_dir / "messages.en.yaml")
        if self.lang == "en":
            own = english
        else:
            own = _read_catalogue(base_dir / f"messages.{self.lang}.yaml")
        self._layers = (own, english, MESSAGES)

    def t(self, key: str, **params: Any) -> str:
        template = next((layer[key] for layer in self._layers if layer.get(key)), key)
        return template.format(**params) if params else template


@lru_cache
def _catalogue(lang: str) -> I18n:
    return I18n(lang)


def language_for(language_code: str | None) -> str:
    code = (language_code or "en").lower()
    return "ru" if code.startswith("ru") else "en"


def translate(lang: str, key: str, **params: Any) -> str:
    """Translate ``key`` and substitute ``params`` into the template."""
    return _catalogue(lang).t(key, **params)


__all__ = ["I18n", "MESSAGES", "language_for", "translate"]
