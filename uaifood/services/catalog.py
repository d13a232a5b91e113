"""
Menu Catalog Service

CRUD over categories and items. Items always reference an existing category;
neither can be deleted while something still points at it.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from uaifood.core.errors import Conflict, NotFound, ValidationFailed
from uaifood.models import Category, Item, OrderItem
from uaifood.schemas import CategoryCreate, CategoryUpdate, ItemCreate, ItemUpdate

logger = logging.getLogger(__name__)

CATEGORY_EXISTS = "This category already exists."
CATEGORY_NOT_FOUND = "Category not found."
CATEGORY_IN_USE = "This category cannot be deleted because items still belong to it."
ITEM_NOT_FOUND = "Item not found."
ITEM_IN_USE = "This item cannot be deleted because it appears in existing orders."


# =============================================================================
# CATEGORIES
# =============================================================================

async def _ensure_unique_description(
    db: AsyncSession,
    description: str,
    exclude_id: Optional[int] = None,
) -> None:
    stmt = select(Category.id).where(Category.description == description)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if await db.scalar(stmt) is not None:
        raise Conflict(CATEGORY_EXISTS, description=description)


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    await _ensure_unique_description(db, data.description)

    category = Category(description=data.description)
    db.add(category)
    await db.commit()
    logger.info(f"Category #{category.id} created: {category.description}")
    return category


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.scalars(select(Category).order_by(Category.description.asc()))
    return list(result)


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFound(CATEGORY_NOT_FOUND, category_id=category_id)
    return category


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
    category = await get_category(db, category_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "description" in changes:
        await _ensure_unique_description(db, changes["description"], exclude_id=category_id)

    for field, value in changes.items():
        setattr(category, field, value)
    await db.commit()
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await get_category(db, category_id)

    item_count = await db.scalar(
        select(func.count(Item.id)).where(Item.category_id == category_id)
    )
    if item_count:
        raise Conflict(CATEGORY_IN_USE, category_id=category_id, items=item_count)

    await db.delete(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(CATEGORY_IN_USE, category_id=category_id)

    logger.info(f"Category #{category_id} deleted")


# =============================================================================
# ITEMS
# =============================================================================

async def _validate_category_exists(db: AsyncSession, category_id: int) -> None:
    # A dangling category reference is bad input, not a missing item
    if await db.get(Category, category_id) is None:
        raise ValidationFailed(CATEGORY_NOT_FOUND, category_id=category_id)


async def _load_item(db: AsyncSession, item_id: int) -> Item:
    item = await db.scalar(
        select(Item)
        .options(selectinload(Item.category))
        .where(Item.id == item_id)
        .execution_options(populate_existing=True)
    )
    if item is None:
        raise NotFound(ITEM_NOT_FOUND, item_id=item_id)
    return item


async def create_item(db: AsyncSession, data: ItemCreate) -> Item:
    await _validate_category_exists(db, data.category_id)

    item = Item(
        description=data.description,
        unit_price=data.unit_price,
        category_id=data.category_id,
    )
    db.add(item)
    await db.commit()
    logger.info(f"Item #{item.id} created: {item.description} ({item.unit_price})")
    return await _load_item(db, item.id)


async def list_items(db: AsyncSession) -> list[Item]:
    result = await db.scalars(
        select(Item)
        .options(selectinload(Item.category))
        .order_by(Item.description.asc())
    )
    return list(result)


async def get_item(db: AsyncSession, item_id: int) -> Item:
    return await _load_item(db, item_id)


async def update_item(db: AsyncSession, item_id: int, data: ItemUpdate) -> Item:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "category_id" in changes:
        await _validate_category_exists(db, changes["category_id"])

    item = await _load_item(db, item_id)
    for field, value in changes.items():
        setattr(item, field, value)
    await db.commit()
    return await _load_item(db, item_id)


async def delete_item(db: AsyncSession, item_id: int) -> None:
    item = await db.get(Item, item_id)
    if item is None:
        raise NotFound(ITEM_NOT_FOUND, item_id=item_id)

    line_count = await db.scalar(
        select(func.count(OrderItem.id)).where(OrderItem.item_id == item_id)
    )
    if line_count:
        raise Conflict(ITEM_IN_USE, item_id=item_id, order_lines=line_count)

    await db.delete(item)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(ITEM_IN_USE, item_id=item_id)

    logger.info(f"Item #{item_id} deleted")
