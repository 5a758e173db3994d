from pokeprice.api.cards import router as cards_router
from pokeprice.api.health import router as health_router
from pokeprice.api.pricing import router as pricing_router
from pokeprice.api.sets import router as sets_router

__all__ = [
    "cards_router",
    "health_router",
    "pricing_router",
    "sets_router",
]
