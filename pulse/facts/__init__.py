from pulse.facts.questions import (
    COUNTRIES, Country, HeadOfStateQuestion,
    match_head_of_state_question, render_head_of_state_answer,
)
from pulse.facts.wikidata import lookup_head_of_state

__all__ = [
    "COUNTRIES", "Country", "HeadOfStateQuestion",
    "match_head_of_state_question", "render_head_of_state_answer",
    "lookup_head_of_state",
]
