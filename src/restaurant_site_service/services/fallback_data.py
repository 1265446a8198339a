"""Placeholder catalog content shown on public pages before any real records exist."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from restaurant_site_service.models.catalog_models import GalleryItem, MenuItem

# Fixed timestamps keep fallback listings stable across requests. Earlier
# entries are newer so newest-first ordering preserves the curated order.
FALLBACK_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def _stamp(position: int) -> datetime:
    return FALLBACK_EPOCH - timedelta(minutes=position)


_GALLERY_ENTRIES = [
    ("fallback-hero-dining", "/assets/hero-dining.jpg", "Interior",
     "Elegant dining setup bathed in warm candlelight"),
    ("fallback-restaurant-interior", "/assets/restaurant-interior.jpg", "Interior",
     "Our cozy lounge perfect for intimate conversations"),
    ("fallback-food-main", "/assets/food-main.jpg", "Food",
     "Signature sea bass with saffron risotto"),
    ("fallback-food-starter", "/assets/food-starter.jpg", "Food",
     "Starter trio featuring seasonal ingredients"),
    ("fallback-food-dessert", "/assets/food-dessert.jpg", "Food",
     "Decadent desserts to end the night sweetly"),
    ("fallback-moments-dining", "/assets/food-main.jpg", "Moments",
     "Memorable celebrations hosted with style"),
    ("fallback-terrace", "/assets/hero-dining.jpg", "Interior",
     "Starlit terrace open for relaxed evenings"),
    ("fallback-bar", "/assets/restaurant-interior.jpg", "Moments",
     "Mixology crafted at our intimate bar"),
]

_MENU_ENTRIES = [
    ("fallback-starters-1", "Bruschetta Trio",
     "Toasted baguette topped with tomato basil, wild mushroom, and olive tapenade",
     "1200", "starters", "/assets/food-starter.jpg"),
    ("fallback-starters-2", "Prawn Ceviche",
     "Citrus-marinated prawns, avocado, pickled shallots, and micro herbs",
     "1650", "starters", "/assets/food-starter.jpg"),
    ("fallback-starters-3", "Roasted Pumpkin Soup",
     "Silky pumpkin velouté with coconut cream and toasted pepitas",
     "980", "starters", "/assets/food-starter.jpg"),
    ("fallback-mains-1", "Grilled Sea Bass",
     "Pan-seared sea bass, saffron risotto, blistered cherry tomatoes",
     "3200", "mains", "/assets/food-main.jpg"),
    ("fallback-mains-2", "Herb-Crusted Lamb",
     "New Zealand lamb rack, rosemary jus, truffle mash, glazed baby carrots",
     "3850", "mains", "/assets/food-main.jpg"),
    ("fallback-mains-3", "Flamingo Signature Pasta",
     "Handmade fettuccine with lobster tail, garlic confit, and chili butter",
     "2650", "mains", "/assets/food-main.jpg"),
    ("fallback-desserts-1", "Chocolate Lava Cake",
     "Molten dark chocolate centre with vanilla bean ice cream",
     "890", "desserts", "/assets/food-dessert.jpg"),
    ("fallback-desserts-2", "Rose Panna Cotta",
     "Fragrant rose panna cotta, berry compote, pistachio crumble",
     "820", "desserts", "/assets/food-dessert.jpg"),
    ("fallback-desserts-3", "Tropical Pavlova",
     "Coconut meringue, passionfruit curd, seasonal tropical fruit",
     "760", "desserts", "/assets/food-dessert.jpg"),
    ("fallback-beverages-1", "Flamingo Sunrise Mocktail",
     "Guava, pineapple, grenadine, and lime over crushed ice",
     "650", "beverages", None),
    ("fallback-beverages-2", "Cold Brew Tonic",
     "Single-origin cold brew, citrus peel, and artisanal tonic",
     "580", "beverages", None),
    ("fallback-beverages-3", "Classic Espresso Martini",
     "Espresso, vanilla, and roasted cacao bitters",
     "1100", "beverages", None),
    ("fallback-beverages-4", "Ceylon Spiced Chai",
     "Hand-ground spices simmered with premium Ceylon black tea",
     "540", "beverages", None),
]

FALLBACK_GALLERY_ITEMS: tuple[GalleryItem, ...] = tuple(
    GalleryItem(
        id=item_id,
        image_url=image_url,
        category=category,
        caption=caption,
        visible=True,
        created_at=_stamp(position),
        updated_at=_stamp(position),
    )
    for position, (item_id, image_url, category, caption) in enumerate(_GALLERY_ENTRIES)
)

FALLBACK_MENU_ITEMS: tuple[MenuItem, ...] = tuple(
    MenuItem(
        id=item_id,
        name=name,
        description=description,
        price=Decimal(price),
        category=category,
        image_url=image_url,
        visible=True,
        created_at=_stamp(position),
        updated_at=_stamp(position),
    )
    for position, (item_id, name, description, price, category, image_url) in enumerate(
        _MENU_ENTRIES
    )
)
