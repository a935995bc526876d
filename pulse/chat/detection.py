"""
chat/detection.py — Lexical name and language detection.

No LLM involved: both checks are plain regex / word matching so they cost
nothing and are easy to unit test. Adding a locale means adding a
NamePattern and, if needed, words to the language list.
"""
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NamePattern:
    language: str
    regex: re.Pattern
    # Matched against the text before the phrase; a hit means it is a question, not an introduction
    asked: re.Pattern | None = None


SPANISH_ASKED = re.compile(r"\bc[oó]mo\W*$", re.IGNORECASE)
ENGLISH_ASKED = re.compile(r"\b(?:what|whether|if)\W*$", re.IGNORECASE)

DEFAULT_NAME_PATTERNS: tuple[NamePattern, ...] = (
    NamePattern("en", re.compile(r"\bmy\s+name\s+is\s+([^\W\d_]+)", re.IGNORECASE), ENGLISH_ASKED),
    NamePattern("es", re.compile(r"\bme\s+llamo\s+([^\W\d_]+)", re.IGNORECASE), SPANISH_ASKED),
    NamePattern("es", re.compile(r"\bmi\s+nombre\s+es\s+([^\W\d_]+)", re.IGNORECASE), SPANISH_ASKED),
)

# Words that can follow the phrase but are never a name
NOT_NAMES = frozenset({
    "ahora", "hoy", "yo", "asi", "así", "tambien", "también", "bien", "de", "en", "y",
    "now", "not", "also", "actually", "really", "and", "the", "a",
})


class NameDetector:
    """Extracts a self-introduced name. Patterns are tried in order; first match wins."""

    def __init__(self, patterns: tuple[NamePattern, ...] = DEFAULT_NAME_PATTERNS) -> None:
        self.patterns = patterns

    def detect(self, text: str) -> str | None:
        for pattern in self.patterns:
            for match in pattern.regex.finditer(text):
                if pattern.asked and pattern.asked.search(text[: match.start()]):
                    continue
                if match.group(1).lower() in NOT_NAMES:
                    continue
                return match.group(1)
        return None


# ── Language ──────────────────────────────────────────────────────────────────

SPANISH_MARKERS = re.compile(r"[áéíóúüñ¿¡]", re.IGNORECASE)

SPANISH_WORDS = frozenset({
    "hola", "que", "como", "quien", "donde", "cuando", "cual", "por", "para",
    "gracias", "me", "mi", "tu", "yo", "es", "el", "la", "los", "las", "un",
    "una", "de", "del", "con", "pero", "estoy", "eres", "soy", "llamo",
    "quiero", "puedes", "bien", "buenos", "dias", "noches", "ayuda", "sabes",
})

SPANISH_WORD_THRESHOLD = 2


def detect_language(text: str) -> str:
    """Returns "es" or "en". Accented characters decide immediately; otherwise count Spanish words."""
    if SPANISH_MARKERS.search(text):
        return "es"
    words = re.findall(r"[a-z]+", text.lower())
    hits = sum(1 for word in words if word in SPANISH_WORDS)
    return "es" if hits >= SPANISH_WORD_THRESHOLD else "en"
