"""Nutrition-facts extraction from OCR text."""

import math
import re
from dataclasses import dataclass

from nutrition_ledger.domain.nutrition import NutritionRecord

_NOISE = re.compile(r"[^\w\s.\-:/%]|_")
_WHITESPACE = re.compile(r"\s+")

# A complete number that is not a daily-value percentage.
_AMOUNT = r"(?P<value>-?\d+(?:\.\d+)?)(?!\d|\.\d|\s*%)"
_UNIT = r"(?:\s*(?P<unit>kcal|cal|kj|mcg|µg|μg|ug|mg|grams|gram|g)(?![a-z]))?"

ENERGY = frozenset({"kcal", "cal"})
GRAMS = frozenset({"g", "gram", "grams"})
MILLIGRAMS = frozenset({"mg"})
MICROGRAMS = frozenset({"mcg", "µg", "μg", "ug"})


@dataclass(frozen=True)
class NutrientPattern:
    """Ordered label phrasings for one nutrient, most specific first."""

    nutrient: str
    units: frozenset[str]
    alternatives: tuple[re.Pattern[str], ...]


def _label(phrase: str, *, not_after: tuple[str, ...] = ()) -> re.Pattern[str]:
    """Match ``phrase`` followed by an amount, e.g. ``total fat 5g``."""
    words = r"\s*".join(re.escape(word) for word in phrase.split())
    guards = "".join(f"(?<!{re.escape(prefix)})" for prefix in not_after)
    return re.compile(rf"(?<![a-z]){guards}{words}(?![a-z])[\s:]*{_AMOUNT}{_UNIT}")


_FAT_PREFIXES = ("saturated ", "sat ", "sat. ", "trans ", "from ")

PATTERNS: tuple[NutrientPattern, ...] = (
    NutrientPattern(
        "calories",
        ENERGY,
        (
            _label("calories"),
            _label("energy"),
            re.compile(rf"(?<![\w.]){_AMOUNT}\s*(?P<unit>kcal)(?![a-z])"),
            _label("kcal"),
        ),
    ),
    NutrientPattern("protein", GRAMS, (_label("protein"),)),
    NutrientPattern(
        "carbs",
        GRAMS,
        (
            _label("total carbohydrates"),
            _label("total carbohydrate"),
            _label("total carbs"),
            _label("total carb."),
            _label("carbohydrates"),
            _label("carbohydrate"),
            _label("carbs"),
        ),
    ),
    NutrientPattern(
        "fat",
        GRAMS,
        (_label("total fat"), _label("fat", not_after=_FAT_PREFIXES)),
    ),
    NutrientPattern(
        "saturated_fat",
        GRAMS,
        (_label("saturated fat"), _label("sat. fat"), _label("sat fat")),
    ),
    NutrientPattern("trans_fat", GRAMS, (_label("trans fat"),)),
    NutrientPattern(
        "cholesterol",
        MILLIGRAMS,
        (_label("cholesterol"), _label("cholest.")),
    ),
    NutrientPattern("sodium", MILLIGRAMS, (_label("sodium"),)),
    NutrientPattern(
        "fiber",
        GRAMS,
        (
            _label("dietary fiber"),
            _label("dietary fibre"),
            _label("fiber"),
            _label("fibre"),
        ),
    ),
    NutrientPattern(
        "sugar",
        GRAMS,
        (
            _label("total sugars"),
            _label("total sugar"),
            _label("sugars", not_after=("added ",)),
            _label("sugar", not_after=("added ",)),
        ),
    ),
    NutrientPattern(
        "added_sugar",
        GRAMS,
        (
            _label("added sugars"),
            _label("added sugar"),
            re.compile(rf"includes\s*{_AMOUNT}{_UNIT}\s*(?:of\s*)?added\s*sugars?"),
        ),
    ),
    NutrientPattern(
        "vitamin_d",
        MICROGRAMS,
        (_label("vitamin d"), _label("vit. d"), _label("vit d")),
    ),
    NutrientPattern("calcium", MILLIGRAMS, (_label("calcium"),)),
    NutrientPattern("iron", MILLIGRAMS, (_label("iron"),)),
    NutrientPattern("potassium", MILLIGRAMS, (_label("potassium"), _label("potas."))),
)


def normalize(raw_text: str) -> str:
    """Strip OCR noise, collapse whitespace and lower-case the text."""
    cleaned = _NOISE.sub(" ", raw_text)
    return _WHITESPACE.sub(" ", cleaned).strip().lower()


def extract(raw_text: str | bytes | None) -> NutritionRecord:
    """Read nutrition values from recognized label text.

    Never raises; nutrients that cannot be found are left unpopulated.
    """
    if raw_text is None:
        return NutritionRecord()
    if isinstance(raw_text, bytes):
        raw_text = raw_text.decode("utf-8", errors="ignore")
    text = normalize(str(raw_text))
    values: dict[str, float] = {}
    for pattern in PATTERNS:
        amount = _first_amount(text, pattern)
        if amount is not None:
            values[pattern.nutrient] = amount
    return NutritionRecord(**values)


def has_nutrition_data(record: NutritionRecord) -> bool:
    """Return True when a scan found anything worth confirming."""
    return record.has_positive_value()


def _first_amount(text: str, pattern: NutrientPattern) -> float | None:
    for alternative in pattern.alternatives:
        for match in alternative.finditer(text):
            unit = match.group("unit")
            if unit is not None and unit not in pattern.units:
                continue
            amount = _parse_amount(match.group("value"))
            if amount is not None:
                return amount
    return None


def _parse_amount(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value
