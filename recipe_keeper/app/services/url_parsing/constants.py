"""Static lookup tables shared by the recipe extractors."""

from types import MappingProxyType

# Named entities decoded by clean_text. Numeric entities (&#39; / &#x27;) are
# handled generically and need no entry here.
HTML_ENTITIES = MappingProxyType(
    {
        "amp": "&",
        "lt": "<",
        "gt": ">",
        "quot": '"',
        "apos": "'",
        "nbsp": " ",
        "ndash": "–",
        "mdash": "—",
        "lsquo": "‘",
        "rsquo": "’",
        "ldquo": "“",
        "rdquo": "”",
        "hellip": "…",
        "deg": "°",
        "frac12": "½",
        "frac14": "¼",
        "frac34": "¾",
        "times": "×",
        "copy": "©",
        "reg": "®",
        "trade": "™",
        "eacute": "é",
        "egrave": "è",
        "ntilde": "ñ",
        "uuml": "ü",
        "ouml": "ö",
        "auml": "ä",
    }
)

INGREDIENTS_PLACEHOLDER = "Ingredients not found. Please check the original recipe."
DIRECTIONS_PLACEHOLDER = "Directions not found. Please check the original recipe."
DEFAULT_CATEGORY = "Recipe"
PLACEHOLDER_IMAGE_PATH = "/placeholder.svg"

RECIPE_ITEMTYPES = (
    "http://schema.org/recipe",
    "https://schema.org/recipe",
)

META_IMAGE_SELECTORS = (
    'meta[property="og:image"]',
    'meta[name="twitter:image"]',
    'meta[property="og:image:secure_url"]',
)

RECIPE_IMAGE_SELECTORS = (
    'img[class*="hero"]',
    'img[class*="featured"]',
    'img[class*="recipe-image"]',
    'img[class*="recipeImage"]',
    'img[class*="recipe_image"]',
    'img[class*="mainImage"]',
    'img[class*="main-image"]',
    'img[id*="recipe-image"]',
    "img[data-pin-media]",
    ".recipe-image img",
    ".recipeImage img",
    ".recipe_image img",
    ".hero-photo img",
    ".post-thumbnail img",
    ".featured-image img",
    ".entry-image img",
    "figure img",
)

CONTENT_AREA_SELECTORS = (
    "article",
    ".post-content",
    ".entry-content",
    ".content",
    ".recipe-content",
    "main",
    "#content",
    ".main-content",
)

DESCRIPTION_SELECTORS = (
    'p[class*="description"], div[class*="description"]',
    'p[class*="summary"], div[class*="summary"]',
    'p[class*="intro"], div[class*="intro"]',
    "p",
)

INGREDIENT_SECTION_SELECTOR = (
    'section[class*="ingredient"], div[class*="ingredient"], ul[class*="ingredient"]'
)

DIRECTION_SECTION_SELECTOR = (
    'section[class*="instruction"], section[class*="direction"], '
    'div[class*="instruction"], div[class*="direction"], div[class*="method"]'
)

DIRECTION_HEADING_KEYWORDS = ("instruction", "direction", "method", "preparation")

YIELD_SELECTOR = '[class*="yield"], [class*="serving"], [id*="yield"], [id*="serving"]'
YIELD_DATA_ATTRIBUTES = ("data-serves", "data-yield", "data-servings")

MEAT_KEYWORDS = ("chicken", "beef", "pork", "meat", "fish", "salmon", "tuna", "shrimp")

TITLE_CATEGORY_KEYWORDS = (
    (("dinner", "meal"), "Dinner"),
    (("dessert", "cake", "cookie"), "Dessert"),
    (("quick", "easy", "simple"), "Quick & Easy"),
)
