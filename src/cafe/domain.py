"""Cafe bounded context: catalog, tax and order lifecycle.

Handles the menu catalog (stock-tracked items), the single current tax rate,
and the order lifecycle: placement, revision, fulfillment and pickup.
"""

from protean.domain import Domain

from cafe.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="cafe")

logger = get_logger(__name__)

# Domain Composition Root
cafe = Domain(name="cafe")
