"""
Catalog Repository

Category/product reads and writes used by the import engine and the
storefront read side. Every write commits on its own: rows are
transactional one at a time, never as a whole batch.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..common.constants import DEFAULT_CATEGORY_ICON
from ..common.errors import CategoryCreationConflict, PersistenceError
from ..models import CategorySummary, CategoryWithImage
from .schema import Category, Product

logger = logging.getLogger(__name__)


def _contains_pattern(text: str) -> str:
    """Build an escaped LIKE pattern matching text anywhere."""
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"


class CatalogRepository:
    """
    Persistence operations over one SQLAlchemy session.

    Usage:
        with session_scope(factory) as session:
            repo = CatalogRepository(session)
            category = repo.get_category_by_name("Дрели")
    """

    def __init__(self, session: Session):
        self.session = session

    def rollback(self) -> None:
        self.session.rollback()

    # ── Categories ───────────────────────────────────────────────────────

    def get_category_by_name(self, name: str, case_insensitive: bool = False) -> Optional[Category]:
        """
        Exact-name lookup (optionally case-insensitive). Oldest match wins.

        Case-insensitive matching is done in Python: SQLite's lower() only
        folds ASCII, and Cyrillic labels are the norm here.
        """
        if not case_insensitive:
            stmt = select(Category).where(Category.name == name).order_by(Category.id).limit(1)
            return self.session.scalars(stmt).first()

        folded = name.casefold()
        for category in self.session.scalars(select(Category).order_by(Category.id)):
            if category.name.casefold() == folded:
                return category
        return None

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.session.get(Category, category_id)

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        return self.session.scalars(select(Category).where(Category.slug == slug)).first()

    def category_slug_exists(self, slug: str) -> bool:
        stmt = select(Category.id).where(Category.slug == slug).limit(1)
        return self.session.execute(stmt).first() is not None

    def create_category(
        self,
        name: str,
        slug: str,
        description: Optional[str] = None,
        icon: str = DEFAULT_CATEGORY_ICON,
    ) -> Category:
        """
        Insert a category.

        Raises:
            CategoryCreationConflict: slug was claimed between check and insert
            PersistenceError: any other store failure
        """
        category = Category(name=name, slug=slug, description=description, icon=icon)
        self.session.add(category)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise CategoryCreationConflict(name, slug) from e
        except Exception as e:
            # Driver errors (e.g. OverflowError from sqlite3) are not wrapped by SQLAlchemy
            self.session.rollback()
            raise PersistenceError(f"Could not create category {name!r}: {e}") from e
        return category

    def count_categories(self) -> int:
        return self.session.scalar(select(func.count(Category.id))) or 0

    # ── Products ─────────────────────────────────────────────────────────

    def find_products_by_identity(self, sku: str, slug: str) -> List[Product]:
        """Products whose SKU equals sku OR whose slug equals slug (at most two)."""
        stmt = (
            select(Product)
            .where(or_(Product.sku == sku, Product.slug == slug))
            .order_by(Product.id)
            .limit(2)
        )
        return list(self.session.scalars(stmt))

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        return self.session.scalars(select(Product).where(Product.sku == sku)).first()

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return self.session.scalars(select(Product).where(Product.slug == slug)).first()

    def product_slug_exists(self, slug: str) -> bool:
        stmt = select(Product.id).where(Product.slug == slug).limit(1)
        return self.session.execute(stmt).first() is not None

    def create_product(self, fields: Dict[str, Any]) -> Product:
        """Insert a product. Raises PersistenceError after rolling back on failure."""
        product = Product(**fields)
        self.session.add(product)
        self._commit(f"insert product sku={fields.get('sku')!r}")
        return product

    def update_product(self, product: Product, fields: Dict[str, Any]) -> Product:
        """Update mutable fields in place; id and created_at are never touched."""
        for key, value in fields.items():
            setattr(product, key, value)
        product.updated_at = datetime.now(timezone.utc)
        self._commit(f"update product id={product.id}")
        return product

    def delete_products_by_tag(self, tag: str) -> int:
        """Delete every product of one supplier tag. Returns number deleted."""
        result = self.session.execute(delete(Product).where(Product.tag == tag))
        self._commit(f"delete products tag={tag!r}")
        return result.rowcount or 0

    def count_products(self) -> int:
        return self.session.scalar(select(func.count(Product.id))) or 0

    def _commit(self, action: str) -> None:
        """Commit, or roll back and raise PersistenceError on any failure."""
        try:
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            raise PersistenceError(f"Could not {action}: {type(e).__name__}: {e}") from e

    # ── Aggregates (storefront read side) ────────────────────────────────

    def categories_with_first_image(self, supplier: Optional[str] = None) -> List[CategoryWithImage]:
        """
        Categories having active products with images, in one aggregate query.

        product_count and the representative image (MIN(image_url)) are
        computed per category in a grouped subquery joined to categories.

        Args:
            supplier: Optional supplier filter (case-insensitive tag contains)
        """
        conditions = [
            Product.is_active.is_(True),
            Product.image_url.is_not(None),
            Product.image_url != "",
        ]
        if supplier:
            conditions.append(Product.tag.ilike(_contains_pattern(supplier), escape='\\'))

        stats = (
            select(
                Product.category_id.label("category_id"),
                func.count(Product.id).label("product_count"),
                func.min(Product.image_url).label("first_image"),
            )
            .where(*conditions)
            .group_by(Product.category_id)
            .subquery()
        )
        stmt = (
            select(Category, stats.c.product_count, stats.c.first_image)
            .join(stats, Category.id == stats.c.category_id)
            .where(stats.c.product_count > 0)
            .order_by(Category.name)
        )

        return [
            CategoryWithImage(
                id=category.id,
                name=category.name,
                slug=category.slug,
                description=category.description,
                icon=category.icon,
                product_count=int(count),
                image_url=image,
            )
            for category, count, image in self.session.execute(stmt)
        ]

    def categories_with_counts(self, supplier: Optional[str] = None) -> List[CategorySummary]:
        """
        All categories with live active-product counts.

        With a supplier filter only categories holding that supplier's
        products are returned.
        """
        conditions = [Product.is_active.is_(True)]
        if supplier:
            conditions.append(Product.tag.ilike(_contains_pattern(supplier), escape='\\'))

        counts = (
            select(Product.category_id.label("category_id"), func.count(Product.id).label("product_count"))
            .where(*conditions)
            .group_by(Product.category_id)
            .subquery()
        )
        product_count = func.coalesce(counts.c.product_count, 0)
        stmt = (
            select(Category, product_count)
            .outerjoin(counts, Category.id == counts.c.category_id)
            .order_by(Category.name)
        )
        if supplier:
            stmt = stmt.where(product_count > 0)

        return [
            CategorySummary(
                id=category.id,
                name=category.name,
                slug=category.slug,
                description=category.description,
                icon=category.icon,
                product_count=int(count),
            )
            for category, count in self.session.execute(stmt)
        ]
