"""
Exercise name normalization for catalog deduplication.

Two exercise names that differ only in casing, accents, punctuation or
spacing produce the same search key, so they resolve to one catalog row.
"""

import re
import unicodedata

DEFAULT_EQUIPMENT = "bodyweight"

# Keyword -> canonical equipment. Longest keyword wins so that
# "smith machine" beats "machine" and "ez bar" beats "bar".
EQUIPMENT_KEYWORDS = {
    "barbell": "barbell",
    "bb": "barbell",
    "dumbbell": "dumbbell",
    "db": "dumbbell",
    "kettlebell": "kettlebell",
    "kb": "kettlebell",
    "cable": "cable",
    "machine": "machine",
    "smith machine": "smith machine",
    "leg press": "machine",
    "lat pulldown": "cable",
    "ez bar": "ez bar",
    "ez curl bar": "ez bar",
    "trap bar": "trap bar",
    "hex bar": "trap bar",
    "resistance band": "resistance band",
    "band": "resistance band",
    "medicine ball": "medicine ball",
    "slam ball": "medicine ball",
    "stability ball": "stability ball",
    "swiss ball": "stability ball",
    "pull up bar": "pull-up bar",
    "chin up bar": "pull-up bar",
    "trx": "suspension trainer",
    "suspension": "suspension trainer",
    "bench": "bench",
    "box": "box",
    "jump rope": "jump rope",
    "treadmill": "treadmill",
    "rower": "rower",
    "rowing machine": "rower",
    "bike": "bike",
    "sled": "sled",
}

_NON_WORD = re.compile(r"[\W_]+")


def create_search_key(name: str) -> str:
    """
    Build the normalized lookup key for an exercise name.

    Accents are folded, the text is casefolded and every run of
    non-word characters collapses to a single space. Letters of any
    script are kept, so "Жим лёжа" and "卧推" get distinct keys.

    Examples:
        >>> create_search_key("Bulgarian Split-Squat!")
        'bulgarian split squat'
        >>> create_search_key("  bulgarian   split squat ")
        'bulgarian split squat'
    """
    folded = unicodedata.normalize("NFKD", name)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return _NON_WORD.sub(" ", folded.casefold()).strip()


def infer_equipment(name: str) -> str:
    """
    Guess the equipment an exercise uses from its name.

    Args:
        name: Exercise display name

    Returns:
        Canonical lowercase equipment name, DEFAULT_EQUIPMENT if nothing matches
    """
    key = f" {create_search_key(name)} "
    for keyword in sorted(EQUIPMENT_KEYWORDS, key=len, reverse=True):
        if f" {keyword} " in key:
            return EQUIPMENT_KEYWORDS[keyword]
    return DEFAULT_EQUIPMENT
