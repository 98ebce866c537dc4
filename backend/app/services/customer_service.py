# services/customer_service.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from app.core.shopify import ShopifyClient
from app.models.capture_model import CustomerRecord, ReconcileResult
from app.utils.locks import KeyedLock

logger = logging.getLogger("ishqme.customers")


class CustomerReconciler:
    """
    Matches a captured contact against Shopify and decides whether to
    create the customer, update its phone, or leave it alone.

    Per invocation: one search, then at most one create or one update.
    Lookup errors propagate; they are never treated as "not found".
    """

    def __init__(self, shopify: ShopifyClient, locks: Optional[KeyedLock] = None):
        self.shopify = shopify
        self.locks = locks

    @asynccontextmanager
    async def _guard(self, email: str):
        if self.locks is None:
            yield
            return
        async with self.locks.hold(email.strip().lower()):
            yield

    async def reconcile(
        self,
        email: str,
        phone: Optional[str] = None,
        discount: Optional[str] = None,
    ) -> ReconcileResult:
        async with self._guard(email):
            existing = await self.shopify.search_customer_by_email(email)

            if existing:
                return await self._reconcile_existing(existing, phone, discount)

            return await self._create(email, phone, discount)

    async def _reconcile_existing(self, existing: dict, phone, discount) -> ReconcileResult:
        if not phone or existing.get("phone") == phone:
            logger.info(f"Customer {existing.get('id')} already up to date")
            return ReconcileResult(record=CustomerRecord(**existing))

        fields = {"phone": phone}
        if discount:
            fields["tags"] = discount
        updated = await self.shopify.update_customer(existing["id"], fields)
        logger.info(f"Customer {existing.get('id')} phone added")
        return ReconcileResult(
            record=CustomerRecord(**updated),
            phone_was_added=True,
            updated=True,
        )

    async def _create(self, email: str, phone, discount) -> ReconcileResult:
        customer = {"email": email, "accepts_marketing": True}
        if discount:
            customer["tags"] = discount
        if phone:
            customer["phone"] = phone

        created = await self.shopify.create_customer(customer)
        return ReconcileResult(
            record=CustomerRecord(**created),
            phone_was_added=bool(phone),
            created=True,
        )
