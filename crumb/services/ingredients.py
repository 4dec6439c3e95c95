import re
from typing import NamedTuple, Optional

UNITS = [
    "cup", "cups", "c",
    "tablespoon", "tablespoons", "tbsp", "tbsps", "tbs", "tbl",
    "teaspoon", "teaspoons", "tsp", "tsps",
    "ounce", "ounces", "oz", "fl oz", "fluid ounce", "fluid ounces",
    "pound", "pounds", "lb", "lbs",
    "gram", "grams", "g", "kilogram", "kilograms", "kg",
    "milliliter", "milliliters", "millilitre", "millilitres", "ml",
    "liter", "liters", "litre", "litres", "l",
    "pint", "pints", "pt", "quart", "quarts", "qt", "gallon", "gallons",
    "pinch", "pinches", "dash", "dashes", "clove", "cloves",
    "slice", "slices", "can", "cans", "package", "packages", "packet", "packets",
    "stick", "sticks", "sprig", "sprigs", "bunch", "bunches", "handful", "handfuls",
]

VULGAR_FRACTIONS = "½⅓⅔¼¾⅕⅖⅗⅘⅙⅚⅛⅜⅝⅞"

NUMBER_RE = rf"(?:\d+\s+\d+\s*/\s*\d+|\d+\s*[{VULGAR_FRACTIONS}]|\d+\s*/\s*\d+|\d+(?:[.,]\d+)?|[{VULGAR_FRACTIONS}])"
QUANTITY_RE = rf"{NUMBER_RE}(?:\s*(?:-|–|to)\s*{NUMBER_RE})?"
UNIT_RE = "|".join(re.escape(u) for u in sorted(set(UNITS), key=len, reverse=True))

INGREDIENT_LINE_RE = re.compile(
    rf"^\s*(?P<quantity>{QUANTITY_RE})\s*(?:(?P<unit>{UNIT_RE})\.?(?=\s|$))?\s*(?P<name>.*)$",
    re.IGNORECASE,
)
LIST_PREFIX_RE = re.compile(r"^\s*(?:[-*•▪●]+)\s*")


class ParsedIngredient(NamedTuple):
    quantity: Optional[str]
    unit: Optional[str]
    name: Optional[str]


def strip_list_prefix(text: str) -> str:
    return LIST_PREFIX_RE.sub("", text).strip()


def parse_ingredient(raw: str) -> ParsedIngredient:
    """Split "1 1/2 cups flour, sifted" into quantity, unit and name.

    Lines without a leading quantity keep the whole text as the name.
    """
    text = strip_list_prefix(raw or "")
    if not text:
        return ParsedIngredient(None, None, None)

    match = INGREDIENT_LINE_RE.match(text)
    if not match:
        return ParsedIngredient(None, None, text)

    quantity = re.sub(r"\s+", " ", match.group("quantity")).strip()
    unit = match.group("unit")
    name = match.group("name").strip(" ,;") or None
    return ParsedIngredient(quantity, unit.lower() if unit else None, name)
