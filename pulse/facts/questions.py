"""
facts/questions.py — Recognise the narrow question class answered from Wikidata.

Only "who is the president of <country>" for a fixed set of countries, in
Spanish or English. Matching runs on accent-stripped lowercase text so
"Quién es el presidente de Panamá?" and "quien es el presidente de panama"
are the same question.
"""
import re
import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class Country:
    entity_id: str     # Wikidata QID
    name_es: str
    name_en: str

    def display_name(self, language: str) -> str:
        return self.name_es if language == "es" else self.name_en


COUNTRIES: dict[str, Country] = {
    "panama": Country(entity_id="Q804", name_es="Panamá", name_en="Panama"),
    "colombia": Country(entity_id="Q739", name_es="Colombia", name_en="Colombia"),
}

_COUNTRY_ALT = "|".join(COUNTRIES)

HEAD_OF_STATE_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("es", re.compile(rf"\bquien\s+es\s+(?:el|la)\s+president[ea]\s+(?:actual\s+)?de\s+({_COUNTRY_ALT})\b")),
    ("en", re.compile(rf"\bwho\s+is\s+the\s+(?:current\s+)?president\s+of\s+({_COUNTRY_ALT})\b")),
)


@dataclass(frozen=True)
class HeadOfStateQuestion:
    country: Country
    language: str


def normalize(text: str) -> str:
    """Lowercase and strip diacritics."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def match_head_of_state_question(text: str) -> HeadOfStateQuestion | None:
    normalized = normalize(text)
    for language, pattern in HEAD_OF_STATE_PATTERNS:
        match = pattern.search(normalized)
        if match:
            return HeadOfStateQuestion(country=COUNTRIES[match.group(1)], language=language)
    return None


def render_head_of_state_answer(question: HeadOfStateQuestion, label: str) -> str:
    country = question.country.display_name(question.language)
    if question.language == "es":
        return f"El presidente de {country} es {label}."
    return f"The president of {country} is {label}."
