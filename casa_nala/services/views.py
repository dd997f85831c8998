"""
Role-scoped order views.

Each staff board is a read-only projection over ``get_orders``:

- kitchen:  status in {pendiente, preparando}, split into two columns
- delivery: type domicilio, every status
- pickup:   type recoger, status in {pendiente, preparando, listo_recoger}

Snapshots are served from ``view_cache`` while the store fingerprint (order
count and latest update) is unchanged, and rebuilt after any order write.
Every order carries ``next_statuses`` so the boards only offer legal moves.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..enums import OrderStatus, OrderType
from ..schemas.orders import KitchenBoardOut, OrderViewOut
from ..view_cache import DELIVERY_VIEW, KITCHEN_VIEW, PICKUP_VIEW, view_cache
from .orders import allowed_transitions, get_orders, orders_fingerprint

logger = logging.getLogger(__name__)

KITCHEN_STATUSES = (OrderStatus.PENDIENTE, OrderStatus.PREPARANDO)
PICKUP_STATUSES = (OrderStatus.PENDIENTE, OrderStatus.PREPARANDO, OrderStatus.LISTO_RECOGER)

# Display order of statuses in selectors
_STATUS_ORDER = list(OrderStatus)


def to_view(order) -> OrderViewOut:
    base = OrderViewOut.from_order(order)
    next_statuses = sorted(
        allowed_transitions(OrderStatus(order.status), OrderType(order.order_type)),
        key=_STATUS_ORDER.index,
    )
    return base.model_copy(update={"next_statuses": next_statuses})


def _load_kitchen(db: Session) -> KitchenBoardOut:
    orders = [to_view(o) for o in get_orders(db, statuses=KITCHEN_STATUSES)]
    logger.debug("Loaded kitchen board with %d orders", len(orders))
    return KitchenBoardOut(
        pendiente=[o for o in orders if o.status == OrderStatus.PENDIENTE],
        preparando=[o for o in orders if o.status == OrderStatus.PREPARANDO],
    )


def kitchen_view(db: Session) -> KitchenBoardOut:
    return view_cache.get_or_load(KITCHEN_VIEW, lambda: _load_kitchen(db), orders_fingerprint(db))


def delivery_view(db: Session) -> List[OrderViewOut]:
    return view_cache.get_or_load(
        DELIVERY_VIEW,
        lambda: [to_view(o) for o in get_orders(db, order_type=OrderType.DOMICILIO)],
        orders_fingerprint(db),
    )


def pickup_view(db: Session) -> List[OrderViewOut]:
    return view_cache.get_or_load(
        PICKUP_VIEW,
        lambda: [
            to_view(o)
            for o in get_orders(db, statuses=PICKUP_STATUSES, order_type=OrderType.RECOGER)
        ],
        orders_fingerprint(db),
    )
