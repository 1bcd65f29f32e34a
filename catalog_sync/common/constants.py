"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Catch-all category for missing or garbage category labels
SENTINEL_CATEGORY_NAME = "Без категории"

DEFAULT_CATEGORY_ICON = "tool"

# Slug probing: base, base-1 ... base-100, then a synthetic fallback
SLUG_MAX_ATTEMPTS = 100

# Per-row error messages kept in a batch result
MAX_BATCH_ERRORS = 10

# Category strip aggregate lifetime (2 minutes)
CATEGORY_CACHE_TTL_SECONDS = 120

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp")

# Field -> lower-case header substrings. Fields are bound in this order,
# so fields whose synonyms are substrings of other headers come first
# (e.g. "Старая цена" must reach original_price before price sees it).
DEFAULT_COLUMN_SYNONYMS = {
    "sku": ["артикул", "sku", "код"],
    "slug": ["slug"],
    "original_price": ["старая цена", "цена до скидки", "original", "old price", "compare"],
    "price": ["цена", "price", "руб", "стоимость"],
    "category_id": ["categoryid", "category_id", "category id", "id категории"],
    "category": ["категор", "group", "category", "группа", "раздел"],
    "name": ["наименование", "название", "товар", "name", "title"],
    "short_description": ["shortdescription", "short_description", "short description", "краткое описание", "анонс"],
    "description": ["описание", "description"],
    "image_url": ["изображение", "картинка", "фото", "image", "img"],
    "stock": ["остаток", "stock", "количество", "qty", "кол-во"],
    "brand": ["бренд", "brand", "производитель", "manufacturer"],
    "model": ["модель", "model"],
    "warranty": ["гарантия", "warranty"],
    "availability": ["наличие", "availability"],
    "tag": ["tag", "тег", "поставщик", "supplier"],
    "is_active": ["active", "активн"],
    "is_featured": ["featured", "хит", "рекоменд"],
}
