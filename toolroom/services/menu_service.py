# toolroom/services/menu_service.py
from sqlalchemy.orm import Session, selectinload

from toolroom.core.logging import get_logger
from toolroom.data.menu import DEFAULT_MENU
from toolroom.models import MenuCategory, MenuCategoryModule

logger = get_logger(__name__)

STYLE_FIELDS = ("icon", "color", "bg_color", "text_color", "border_color")


def _category_dict(category: MenuCategory) -> dict:
    return {
        "slug": category.slug,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
        "bg_color": category.bg_color,
        "text_color": category.text_color,
        "border_color": category.border_color,
        "sort_order": category.sort_order,
        "modules": [m.module_key for m in category.modules],
    }


def default_menu() -> list[dict]:
    return [dict(c, modules=list(c["modules"])) for c in DEFAULT_MENU]


def load_menu(db: Session) -> tuple[list[dict], bool]:
    """Returns (categories, is_default). Empty table means the built-in layout."""
    categories = (
        db.query(MenuCategory)
        .options(selectinload(MenuCategory.modules))
        .order_by(MenuCategory.sort_order, MenuCategory.id)
        .all()
    )
    if not categories:
        return default_menu(), True
    return [_category_dict(c) for c in categories], False


def save_menu(db: Session, categories: list[dict]) -> list[dict]:
    """Replace the whole layout. Order in the list is the display order."""
    db.query(MenuCategoryModule).delete(synchronize_session=False)
    db.query(MenuCategory).delete(synchronize_session=False)
    db.flush()

    for index, item in enumerate(categories):
        category = MenuCategory(
            slug=item["slug"],
            name=item["name"],
            sort_order=index,
            **{k: item[k] for k in STYLE_FIELDS if item.get(k) is not None},
        )
        seen = set()
        for position, module_key in enumerate(item.get("modules") or []):
            if module_key in seen:
                continue
            seen.add(module_key)
            category.modules.append(MenuCategoryModule(module_key=module_key, sort_order=position))
        db.add(category)

    db.commit()
    logger.info("menu_saved", categories=len(categories))
    menu, _ = load_menu(db)
    return menu


def reset_menu(db: Session) -> list[dict]:
    db.query(MenuCategoryModule).delete(synchronize_session=False)
    db.query(MenuCategory).delete(synchronize_session=False)
    db.commit()
    logger.info("menu_reset")
    return default_menu()
