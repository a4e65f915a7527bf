"""
Generate textual variants of a free-text address to improve geocoder recall.

Variants are ordered most-specific first and contain no duplicates. This is
pure string work; nothing here touches the network.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable


DIRECTIONALS = {
    "north": "N",
    "south": "S",
    "east": "E",
    "west": "W",
    "northeast": "NE",
    "northwest": "NW",
    "southeast": "SE",
    "southwest": "SW",
}

STREET_TYPES = {
    "avenue": "Ave",
    "boulevard": "Blvd",
    "circle": "Cir",
    "court": "Ct",
    "drive": "Dr",
    "highway": "Hwy",
    "lane": "Ln",
    "parkway": "Pkwy",
    "place": "Pl",
    "point": "Pt",
    "road": "Rd",
    "street": "St",
    "terrace": "Ter",
    "trail": "Trl",
}

_ABBREVIATE = {**DIRECTIONALS, **STREET_TYPES}
_EXPAND = {abbr.lower(): full.capitalize() for full, abbr in _ABBREVIATE.items()}

# Local spellings that geocoders disagree on, tried in both directions.
LOCAL_ALIASES = (
    ("Lake Shore", "Lakeshore"),
    ("Lake View", "Lakeview"),
    ("Lake Side", "Lakeside"),
    ("Wonder View", "Wonderview"),
)

US_STATE_CODES = frozenset(
    "AL AK AZ AR CA CO CT DE DC FL GA HI ID IL IN IA KS KY LA ME MD MA MI MN MS MO "
    "MT NE NV NH NJ NM NY NC ND OH OK OR PA RI SC SD TN TX UT VT VA WA WV WI WY".split()
)

_WORD_RE = re.compile(r"\b([A-Za-z]+)\b(\.)?")
_STATE_CODE_RE = re.compile(r"\b([A-Z]{2})\b")
_TRAILING_ZIP_RE = re.compile(r"[\s,]*(?:\d{5}(?:-\d{4})?)?\s*")


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip().strip(",").strip()


def _replace_words(text: str, table: dict[str, str]) -> str:
    def repl(match: re.Match) -> str:
        word = match.group(1)
        replacement = table.get(word.lower())
        if replacement is None:
            return match.group(0)
        return replacement

    return _WORD_RE.sub(repl, text)


def abbreviate(text: str) -> str:
    """Shorten directionals and street types: ``East Lake Shore Road`` -> ``E Lake Shore Rd``."""
    return _replace_words(text, _ABBREVIATE)


def expand(text: str) -> str:
    """Spell out directionals and street types: ``E Lake Shore Rd.`` -> ``East Lake Shore Road``."""
    return _replace_words(text, _EXPAND)


def alias_rewrites(text: str) -> list[str]:
    """Every single substitution of a known local alias, in either direction."""
    rewrites = []
    for two_words, one_word in LOCAL_ALIASES:
        for src, dst in ((two_words, one_word), (one_word, two_words)):
            pattern = re.compile(r"\b" + re.escape(src) + r"\b", re.IGNORECASE)
            if pattern.search(text):
                rewrites.append(pattern.sub(dst, text))
    return rewrites


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered = []
    for value in values:
        value = _collapse(value)
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


@dataclass(frozen=True)
class AddressNormalizer:
    """Locality-aware variant generator for one target town."""
    town: str = "Wonder Lake"
    state: str = "IL"
    state_name: str = "Illinois"
    county: str = "McHenry County"

    @property
    def locality_suffix(self) -> str:
        return f"{self.town}, {self.state}"

    @property
    def wide_area_suffix(self) -> str:
        return f"{self.county}, {self.state}"

    def has_locality(self, text: str) -> bool:
        """True when the town, the state name or a two-letter state code is present."""
        lowered = text.lower()
        if self.town.lower() in lowered or self.state_name.lower() in lowered:
            return True

        for match in _STATE_CODE_RE.finditer(text):
            code = match.group(1)
            if code not in US_STATE_CODES:
                continue
            # "NE" and "CT" double as street words; as a state they follow a comma and end the text
            if code.lower() in _EXPAND and not (
                text[:match.start()].rstrip().endswith(",")
                and _TRAILING_ZIP_RE.fullmatch(text[match.end():])
            ):
                continue
            return True
        return False

    def with_locality(self, text: str) -> str:
        if self.has_locality(text):
            return text
        return f"{text}, {self.locality_suffix}"

    def variants(self, raw: str) -> list[str]:
        address = _collapse(raw)
        if not address:
            return []

        abbreviated = abbreviate(address)
        expanded = expand(address)
        aliases = alias_rewrites(address)

        candidates = [
            self.with_locality(address),
            address,
            self.with_locality(abbreviated),
            self.with_locality(expanded),
            *(self.with_locality(a) for a in aliases),
            abbreviated,
            expanded,
            *aliases,
        ]
        if not self.has_locality(address):
            candidates.append(f"{address}, {self.wide_area_suffix}")
        return _unique(candidates)


def address_variants(raw: str, normalizer: AddressNormalizer | None = None) -> list[str]:
    """Ranked, de-duplicated geocoding variants of ``raw``."""
    return (normalizer or AddressNormalizer()).variants(raw)
