"""
tests/test_detection.py — Name and language detection.

Pure regex / word matching, no store or model needed.
"""
import re

from pulse.chat.detection import NameDetector, NamePattern, detect_language


class TestNameDetector:

    def setup_method(self):
        self.detector = NameDetector()

    def test_spanish_me_llamo(self):
        assert self.detector.detect("me llamo Marcos") == "Marcos"

    def test_english_my_name_is(self):
        assert self.detector.detect("my name is Alice") == "Alice"

    def test_inside_a_sentence(self):
        assert self.detector.detect("hola, me llamo Ana") == "Ana"

    def test_mi_nombre_es(self):
        assert self.detector.detect("Mi nombre es Lucía y tengo una pregunta") == "Lucía"

    def test_case_insensitive_keeps_name_as_written(self):
        assert self.detector.detect("MY NAME IS bob") == "bob"

    def test_accented_name(self):
        assert self.detector.detect("me llamo Íñigo") == "Íñigo"

    def test_no_match(self):
        assert self.detector.detect("como me llamo?") is None

    def test_name_must_follow_phrase(self):
        assert self.detector.detect("my name is") is None

    def test_question_about_own_name_is_not_an_introduction(self):
        assert self.detector.detect("¿sabes cómo me llamo ahora?") is None

    def test_unaccented_question(self):
        assert self.detector.detect("y como me llamo yo") is None

    def test_english_question_form(self):
        assert self.detector.detect("do you remember what my name is now?") is None

    def test_filler_word_is_not_a_name(self):
        assert self.detector.detect("me llamo ahora mismo") is None

    def test_introduction_after_a_question(self):
        assert self.detector.detect("¿cómo estás? me llamo Marcos") == "Marcos"

    def test_later_introduction_used_when_first_is_a_question(self):
        assert self.detector.detect("cómo me llamo? ah sí, me llamo Ana") == "Ana"

    def test_first_pattern_wins(self):
        text = "me llamo Ana, my name is Anna"
        detector = NameDetector((
            NamePattern("en", re.compile(r"my name is (\w+)", re.IGNORECASE)),
            NamePattern("es", re.compile(r"me llamo (\w+)", re.IGNORECASE)),
        ))
        assert detector.detect(text) == "Anna"

    def test_custom_locale_pattern(self):
        detector = NameDetector((NamePattern("pt", re.compile(r"meu nome é (\w+)", re.IGNORECASE)),))
        assert detector.detect("Olá, meu nome é João") == "João"
        assert detector.detect("my name is Alice") is None


class TestDetectLanguage:

    def test_accents_mean_spanish(self):
        assert detect_language("¿Qué hora es?") == "es"

    def test_enye_means_spanish(self):
        assert detect_language("manana es el cumpleaños") == "es"

    def test_spanish_words_without_accents(self):
        assert detect_language("como me llamo?") == "es"

    def test_english(self):
        assert detect_language("my name is Alice") == "en"

    def test_single_spanish_word_is_not_enough(self):
        assert detect_language("hola there, how are you") == "en"

    def test_empty_defaults_to_english(self):
        assert detect_language("") == "en"
