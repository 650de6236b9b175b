from storefront.models.address import Address
from storefront.models.category import Category
from storefront.models.color import Color
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.size import Size
from storefront.models.store import Store
from storefront.models.user import User
from storefront.models.variation import ColorVariation, ColorVariationImage, SizeVariation

__all__ = [
    "Address",
    "Category",
    "Color",
    "ColorVariation",
    "ColorVariationImage",
    "Order",
    "OrderItem",
    "Product",
    "Size",
    "SizeVariation",
    "Store",
    "User",
]
