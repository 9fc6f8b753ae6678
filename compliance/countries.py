"""Canonical country normalisation.

Reference data and callers disagree on how countries are written ("UK",
"GB", "GBR", "United Kingdom", "France", "FRA"...). Everything downstream of
``normalize_country`` works with ISO-3166 alpha-2 codes only.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Dict, FrozenSet, Iterable, Tuple

logger = logging.getLogger(__name__)

UNITED_KINGDOM = "GB"

EU_MEMBER_STATES: FrozenSet[str] = frozenset(
    {
        "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI",
        "FR", "DE", "GR", "HU", "IE", "IT", "LV", "LT", "LU",
        "MT", "NL", "PL", "PT", "RO", "SK", "SI", "ES", "SE",
    }
)

# alpha-2, alpha-3, accepted names
_COUNTRIES: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    ("AT", "AUT", ("Austria", "Österreich")),
    ("BE", "BEL", ("Belgium", "Belgique", "België")),
    ("BG", "BGR", ("Bulgaria",)),
    ("HR", "HRV", ("Croatia",)),
    ("CY", "CYP", ("Cyprus",)),
    ("CZ", "CZE", ("Czech Republic", "Czechia", "Česko")),
    ("DK", "DNK", ("Denmark", "Danmark")),
    ("EE", "EST", ("Estonia",)),
    ("FI", "FIN", ("Finland", "Suomi")),
    ("FR", "FRA", ("France",)),
    ("DE", "DEU", ("Germany", "Deutschland")),
    ("GR", "GRC", ("Greece", "Hellas", "Ellada")),
    ("HU", "HUN", ("Hungary",)),
    ("IE", "IRL", ("Ireland", "Republic of Ireland", "Éire")),
    ("IT", "ITA", ("Italy", "Italia")),
    ("LV", "LVA", ("Latvia",)),
    ("LT", "LTU", ("Lithuania",)),
    ("LU", "LUX", ("Luxembourg",)),
    ("MT", "MLT", ("Malta",)),
    ("NL", "NLD", ("Netherlands", "The Netherlands", "Holland", "Nederland")),
    ("PL", "POL", ("Poland", "Polska")),
    ("PT", "PRT", ("Portugal",)),
    ("RO", "ROU", ("Romania",)),
    ("SK", "SVK", ("Slovakia",)),
    ("SI", "SVN", ("Slovenia",)),
    ("ES", "ESP", ("Spain", "España")),
    ("SE", "SWE", ("Sweden", "Sverige")),
    (
        "GB",
        "GBR",
        ("United Kingdom", "UK", "Great Britain", "Britain", "England", "Scotland", "Wales", "Northern Ireland"),
    ),
    ("CH", "CHE", ("Switzerland", "Schweiz", "Suisse", "Svizzera")),
    ("NO", "NOR", ("Norway", "Norge")),
    ("IS", "ISL", ("Iceland",)),
    ("GI", "GIB", ("Gibraltar",)),
    ("TR", "TUR", ("Turkey", "Turkiye")),
    ("US", "USA", ("United States", "United States of America", "America")),
    ("CA", "CAN", ("Canada",)),
    ("AE", "ARE", ("United Arab Emirates", "UAE")),
    ("QA", "QAT", ("Qatar",)),
    ("EG", "EGY", ("Egypt",)),
    ("ZA", "ZAF", ("South Africa",)),
    ("IN", "IND", ("India",)),
    ("TH", "THA", ("Thailand",)),
    ("SG", "SGP", ("Singapore",)),
    ("HK", "HKG", ("Hong Kong",)),
    ("CN", "CHN", ("China",)),
    ("JP", "JPN", ("Japan",)),
    ("KR", "KOR", ("South Korea", "Korea")),
    ("AU", "AUS", ("Australia",)),
)


def _fold(value: str) -> str:
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^A-Z]", "", ascii_value.upper())


def _build_aliases(rows: Iterable[Tuple[str, str, Tuple[str, ...]]]) -> Dict[str, str]:
    aliases: Dict[str, str] = {}
    for alpha2, alpha3, names in rows:
        aliases[alpha2] = alpha2
        aliases[alpha3] = alpha2
        for name in names:
            aliases[_fold(name)] = alpha2
    return aliases


_ALIASES = _build_aliases(_COUNTRIES)


def normalize_country(value: str | None) -> str | None:
    """Return the ISO alpha-2 code for ``value`` or None when unrecognised.

    Unknown two-letter values pass through upper-cased so that any ISO code
    missing from the alias table still classifies as "outside EU/UK".
    """
    if not value or not str(value).strip():
        return None
    raw = str(value).strip()
    folded = _fold(raw)
    if folded in _ALIASES:
        return _ALIASES[folded]
    if len(raw) == 2 and raw.isalpha():
        return raw.upper()
    logger.debug("country_unrecognised", extra={"value": raw})
    return None


def is_eu(country: str | None) -> bool:
    return country in EU_MEMBER_STATES


def is_uk(country: str | None) -> bool:
    return country == UNITED_KINGDOM
