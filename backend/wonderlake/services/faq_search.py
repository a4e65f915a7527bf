"""Fuzzy matching of free-text questions against published FAQs using RapidFuzz."""
from typing import Sequence

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from wonderlake.models.community import DynamicFaq

# Scores are 0-100; a word must be a near-exact hit to count
PHRASE_CUTOFF = 90
WORD_CUTOFF = 90

STOPWORDS = frozenset(
    "a an and are as at be by can do does for from how i if in is it my of on or "
    "the this to what when where which who why will with would you your".split()
)


def keywords(text: str) -> list[str]:
    return [t for t in default_process(text).split() if len(t) > 2 and t not in STOPWORDS]


def score_faq(query: str, faq: DynamicFaq) -> float:
    """Whole-phrase hit on the question wins outright; otherwise fuzzy keyword overlap."""
    query = default_process(query)
    if not query:
        return 0.0

    question = default_process(faq.question)
    answer = default_process(faq.answer)
    if fuzz.partial_ratio(query, question, score_cutoff=PHRASE_CUTOFF):
        return 10.0

    score = 0.0
    for word in keywords(query):
        if fuzz.partial_ratio(word, question, score_cutoff=WORD_CUTOFF):
            score += 2.0
        elif fuzz.partial_ratio(word, answer, score_cutoff=WORD_CUTOFF):
            score += 1.0
    return score


def search_faqs(query: str, faqs: Sequence[DynamicFaq], limit: int = 5) -> list[DynamicFaq]:
    scored = [(score_faq(query, faq), faq) for faq in faqs]
    scored = [item for item in scored if item[0] > 0]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [faq for _, faq in scored[:limit]]
