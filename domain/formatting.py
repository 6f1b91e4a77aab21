from __future__ import annotations

import re
from typing import Any, Dict, Optional

# Club name fragments -> dialling code, used when a phone number has none
CLUB_COUNTRY_CODES: Dict[str, str] = {
    # England
    "arsenal": "+44", "chelsea": "+44", "tottenham": "+44", "liverpool": "+44",
    "manchester": "+44", "everton": "+44", "aston villa": "+44", "newcastle": "+44",
    # Scotland
    "celtic": "+44", "rangers": "+44", "aberdeen": "+44", "hibernian": "+44",
    # Spain
    "real madrid": "+34", "barcelona": "+34", "atletico": "+34", "sevilla": "+34", "valencia": "+34",
    # Germany
    "bayern": "+49", "dortmund": "+49", "leipzig": "+49", "leverkusen": "+49",
    # Italy
    "juventus": "+39", "milan": "+39", "napoli": "+39", "roma": "+39", "lazio": "+39",
    # France
    "paris saint-germain": "+33", "marseille": "+33", "lyon": "+33", "monaco": "+33",
    # Portugal
    "benfica": "+351", "porto": "+351", "sporting": "+351", "braga": "+351",
    # Netherlands
    "ajax": "+31", "psv": "+31", "feyenoord": "+31",
    # Brazil
    "flamengo": "+55", "palmeiras": "+55", "santos": "+55", "corinthians": "+55",
    # Argentina
    "boca juniors": "+54", "river plate": "+54",
}


def format_score_with_frequency(score: float) -> str:
    """Render a per-action rate as '0.25 (1 in 4)'."""
    if score == 0:
        return "0 (never)"
    frequency = round(1 / score)
    return f"{score} (1 in {frequency})"


def format_stat_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else f"{value:.1f}"
    return str(value) if value not in (None, "") else "0"


def format_ig_handle(handle: Optional[str]) -> Optional[str]:
    if not handle:
        return None
    clean = re.sub(r"^@", "", handle).strip()
    return clean or None


def format_phone_for_whatsapp(phone: str, current_club: Optional[str] = None) -> str:
    """Normalise a phone number to digits with country code, as wa.me expects."""
    cleaned = re.sub(r"[^\d+]", "", phone)
    if cleaned.startswith("+"):
        return cleaned.replace("+", "", 1)
    if cleaned.startswith("00"):
        return cleaned[2:]
    if current_club:
        club_lower = current_club.lower()
        for club_name, code in CLUB_COUNTRY_CODES.items():
            if club_name in club_lower:
                if cleaned.startswith("0"):
                    cleaned = cleaned[1:]
                return code.replace("+", "") + cleaned
    # Default: UK number written with trunk prefix
    if cleaned.startswith("0"):
        return "44" + cleaned[1:]
    return cleaned


def slugify(title: str) -> str:
    """URL slug used as the share token of a contract."""
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip()
