"""
Caching policy for cart responses.

Single carts are cached under ``cart_<id>`` and list pages under
``cart_list_<page>_<limit>``. Any write to a cart evicts that cart's entry and
every list page, since any page may embed the cart.
"""
import logging

from service.common.cache import ResponseCache

logger = logging.getLogger("flask.app")

CACHE_KEY_CART = "cart_"
CACHE_KEY_CART_LIST = "cart_list_"
CACHE_TTL = 300  # 5 minutes


def cart_key(cart_id) -> str:
    """Cache key for a single cart"""
    return f"{CACHE_KEY_CART}{cart_id}"


def cart_list_key(page: int, limit: int) -> str:
    """Cache key for one page of the cart list"""
    return f"{CACHE_KEY_CART_LIST}{page}_{limit}"


class CartCacheService:
    """Cart-specific reads and invalidations on top of a ResponseCache"""

    def __init__(self, cache: ResponseCache | None = None, ttl: int = CACHE_TTL):
        self.cache = cache if cache is not None else ResponseCache()
        self.ttl = ttl

    def init_app(self, app):
        """Pick up the TTL from the application configuration"""
        self.ttl = app.config.get("CART_CACHE_TTL", CACHE_TTL)
        app.extensions["cart_cache"] = self

    def get_cart(self, cart_id, compute_fn):
        """Cached single-cart response, computed on a miss"""
        return self.cache.get_or_compute(cart_key(cart_id), self.ttl, compute_fn)

    def get_cart_list(self, page: int, limit: int, compute_fn):
        """Cached list page, computed on a miss"""
        return self.cache.get_or_compute(
            cart_list_key(page, limit), self.ttl, compute_fn
        )

    def invalidate_cart(self, cart_id) -> None:
        """Evict a cart and every list page that might contain it"""
        logger.info("Invalidating cached responses for cart %s", cart_id)
        self.cache.invalidate(cart_key(cart_id))
        self.invalidate_all_lists()

    def invalidate_all_lists(self) -> None:
        """Evict every cached list page"""
        self.cache.invalidate_pattern(CACHE_KEY_CART_LIST)

    def clear(self) -> None:
        self.cache.clear()


# Shared instance initialized in the app factory
cart_cache = CartCacheService()
