"""Reference tables shared across the verification checks.

Usage:
    from catalog_verifier.domain.taxonomy import recommended_units, fallback_titles

    recommended_units(Dimension.VOLUME)        # ['L', 'ML', 'LTR']
    fallback_titles(ProductCategory.OIL)[:2]   # ['Engine Oil/Engine Lubricants', 'Motor Oils']
"""

from catalog_verifier.schemas.category import ProductCategory
from catalog_verifier.schemas.descriptors import Dimension

RECOMMENDED_UNITS: dict[Dimension, list[str]] = {
    Dimension.VOLUME: ["L", "ML", "LTR"],
    Dimension.WEIGHT: ["KG", "G"],
    Dimension.QUANTITY: ["PC", "EA", "UNIT"],
    Dimension.LENGTH: ["M", "CM", "MM"],
    Dimension.AREA: ["M2", "SQM", "SQFT"],
}

UNIT_EXPLANATIONS: dict[Dimension, str] = {
    Dimension.VOLUME: "volume units such as liters or milliliters",
    Dimension.WEIGHT: "weight units such as kilograms or grams",
    Dimension.QUANTITY: "quantity units such as piece or each",
    Dimension.LENGTH: "length units such as meters or centimeters",
    Dimension.AREA: "area units such as square meters or square feet",
}

# Terms expected somewhere in a classification label of that category.
# Also used to search the classification catalog for title suggestions.
FAMILY_TERMS: dict[ProductCategory, tuple[str, ...]] = {
    ProductCategory.OIL: ("oil", "lubricant", "engine oil", "motor oil", "automotive oil", "lubricating oil"),
    ProductCategory.CLEANING: ("cleaning", "detergent", "laundry", "cleaner", "washing powder"),
    ProductCategory.FOOD: ("food", "edible", "grocery", "consumable"),
    ProductCategory.BEVERAGE: ("beverage", "drink", "water", "liquid refreshment"),
    ProductCategory.PERSONAL_CARE: ("personal care", "cosmetic", "beauty", "toiletry"),
    ProductCategory.ELECTRONIC: ("electronic", "device", "digital", "computer", "appliance"),
    ProductCategory.CLOTHING: ("clothing", "apparel", "garment", "wear"),
    ProductCategory.HOUSEHOLD: ("household", "home", "domestic"),
}

FALLBACK_TITLES: dict[ProductCategory, list[str]] = {
    ProductCategory.OIL: [
        "Engine Oil/Engine Lubricants", "Motor Oils", "Automotive Lubricants", "Vehicle Lubricants",
    ],
    ProductCategory.CLEANING: ["Laundry Detergents", "Household Cleaning Products", "Cleaning Agents"],
    ProductCategory.FOOD: ["Food Items", "Packaged Food", "Grocery Products"],
    ProductCategory.BEVERAGE: ["Beverages", "Drinks", "Water - Packaged", "Bottled Drinks"],
    ProductCategory.ELECTRONIC: ["Electronics", "Electronic Devices", "Consumer Electronics"],
    ProductCategory.CLOTHING: ["Clothing", "Apparel", "Garments"],
    ProductCategory.PERSONAL_CARE: ["Personal Care Products", "Cosmetics", "Beauty Products"],
    ProductCategory.HOUSEHOLD: ["Household Products", "Home Goods", "Domestic Items"],
}

# Categories whose classification titles are prefetched once per batch
PREFETCH_CATEGORIES = (
    ProductCategory.OIL,
    ProductCategory.BEVERAGE,
    ProductCategory.FOOD,
    ProductCategory.CLEANING,
)


def recommended_units(dimension: Dimension) -> list[str]:
    return list(RECOMMENDED_UNITS.get(dimension, []))


def category_label(category: ProductCategory) -> str:
    """Human label, e.g. ``oil_product`` → ``oil product``."""
    return category.value.replace("_", " ")


def fallback_titles(category: ProductCategory) -> list[str]:
    if category in FALLBACK_TITLES:
        return list(FALLBACK_TITLES[category])
    return [f"{category_label(category).title()} Products"]
