"""Language detection, translation and story digests via the chat model.

Prompt texts live in data/prompts/*.yaml.
"""

import re

from ..config import get_settings
from ..errors import BotError
from ..log import get_logger
from .client import llm_client
from .prompts import load_prompt

settings = get_settings()
logger = get_logger("language")

DEFAULT_CODE = "en"

_CODE_RE = re.compile(r"\b([a-z]{2,3})(?:-[a-z]{2,4})?\b")

# ISO 639 codes the bot expects to see; a bare English word like "it" or "is"
# only counts when nothing code-like follows it
KNOWN_LANGUAGES = frozenset({
    "af", "ar", "az", "bg", "bn", "ca", "cs", "cy", "da", "de", "el", "en", "es", "et",
    "eu", "fa", "fi", "fil", "fr", "ga", "gl", "gu", "he", "hi", "hr", "hu", "hy", "id",
    "is", "it", "ja", "ka", "kk", "km", "kn", "ko", "lo", "lt", "lv", "mn", "mr", "ms",
    "my", "nb", "ne", "nl", "no", "pa", "pl", "pt", "ro", "ru", "si", "sk", "sl", "sq",
    "sr", "sv", "sw", "ta", "te", "th", "tl", "tr", "uk", "ur", "vi", "yue", "zh",
})


def normalize_language_code(raw: str) -> str:
    """
    Reduce a model answer like ' "zh-TW".' or 'The language code is ja' to a
    lowercase BCP-47-ish code: the last token whose primary subtag is a known
    language. Returns DEFAULT_CODE if there is none.
    """
    candidate = raw.strip().lower().replace("_", "-")
    codes = [m.group(0) for m in _CODE_RE.finditer(candidate) if m.group(1) in KNOWN_LANGUAGES]
    # Models put the answer last ("It is en", "The language code is ja")
    return codes[-1] if codes else DEFAULT_CODE


def needs_translation(language_code: str) -> bool:
    code = language_code.lower()
    return code not in (DEFAULT_CODE, settings.DEFAULT_LANGUAGE.lower())


async def detect_language(text: str) -> str:
    """Best effort; any failure means English."""
    try:
        prompt = f"{load_prompt('get_language_code')} {text}"
        answer = await llm_client.complete(prompt, temperature=0.0, max_tokens=10)
    except (BotError, FileNotFoundError) as e:
        logger.warning(f"Language detection failed, assuming '{DEFAULT_CODE}': {e}")
        return DEFAULT_CODE
    return normalize_language_code(answer)


async def translate(content: str, language_code: str) -> str:
    prompt = f"{load_prompt('translate')} {language_code}: {content}"
    return await llm_client.complete(prompt, model=settings.MODEL_TRANSLATE, temperature=0.05)


async def translate_if_needed(content: str, language_code: str) -> str:
    """Translated text when the user's language calls for it; the original text if translation fails."""
    if not needs_translation(language_code):
        return content
    try:
        return await translate(content, language_code)
    except (BotError, FileNotFoundError) as e:
        logger.error(f"Translation to '{language_code}' failed, sending untranslated: {e}")
        return content


async def summarize_stories(stories_text: str) -> str:
    prompt = f"{load_prompt('summary_all')} {stories_text}"
    return await llm_client.complete(prompt, temperature=0.05)
