"""Ordering bounded context — drink carts, orders and the admin order board.

Customers build a cart of priced drinks and submit it as an Order; staff move
orders through their status lifecycle, edit line items, and watch a live feed
of order snapshots.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
