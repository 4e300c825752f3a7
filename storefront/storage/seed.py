# storefront/storage/seed.py
import logging
from decimal import Decimal

from storefront.schemas.category import CategoryCreate
from storefront.schemas.product import ProductCreate
from storefront.schemas.subscription import SubscriptionCreate
from storefront.storage.base import Storage

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Animais", "icon": "fas fa-paw", "slug": "animais"},
    {"name": "Utilidades para o Lar", "icon": "fas fa-home", "slug": "utilidades"},
    {"name": "Enfeites", "icon": "fas fa-star", "slug": "enfeites"},
    {"name": "Lembranças", "icon": "fas fa-gift", "slug": "lembrancas"},
    {"name": "Festas", "icon": "fas fa-birthday-cake", "slug": "festas"},
]

# (category slug, product fields)
DEFAULT_PRODUCTS = [
    (
        "animais",
        {
            "name": "Dragão Fantasia",
            "description": "Miniatura detalhada para pintura",
            "price": Decimal("25.00"),
            "image_url": "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=400&h=300",
            "print_type": "resin",
            "featured": True,
        },
    ),
    (
        "utilidades",
        {
            "name": "Vaso Geométrico",
            "description": "Decoração moderna para casa",
            "price": Decimal("18.00"),
            "image_url": "https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=400&h=300",
            "print_type": "filament",
            "featured": True,
        },
    ),
    (
        "animais",
        {
            "name": "Gatinho Fofo",
            "description": "Perfeito para crianças",
            "price": Decimal("15.00"),
            "image_url": "https://images.unsplash.com/photo-1544568100-847a948585b9?w=400&h=300",
            "print_type": "resin",
            "featured": True,
        },
    ),
    (
        "utilidades",
        {
            "name": "Utensílio Cozinha",
            "description": "Funcional e durável",
            "price": Decimal("12.00"),
            "image_url": "https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=400&h=300",
            "print_type": "filament",
            "featured": True,
        },
    ),
]

DEFAULT_SUBSCRIPTIONS = [
    {
        "name": "Premium Mensal",
        "description": "Acesso a modelos exclusivos e descontos",
        "monthly_price": Decimal("29.90"),
        "yearly_price": Decimal("299.90"),
        "features": [
            "Acesso a modelos exclusivos",
            "20% de desconto em todas as compras",
            "Suporte prioritário",
            "Tutoriais avançados de pintura",
        ],
        "active": True,
    },
]


def seed_defaults(storage: Storage) -> bool:
    """
    Insert the default catalog when the store has no categories yet.

    Returns True when data was inserted.
    """
    if storage.list_categories():
        return False

    by_slug = {}
    for data in DEFAULT_CATEGORIES:
        category = storage.create_category(CategoryCreate(**data))
        by_slug[category.slug] = category.id

    for slug, data in DEFAULT_PRODUCTS:
        storage.create_product(ProductCreate(category_id=by_slug[slug], **data))

    for data in DEFAULT_SUBSCRIPTIONS:
        storage.create_subscription(SubscriptionCreate(**data))

    logger.info(
        "Seeded %d categories, %d products, %d subscription plans",
        len(DEFAULT_CATEGORIES),
        len(DEFAULT_PRODUCTS),
        len(DEFAULT_SUBSCRIPTIONS),
    )
    return True
