# core/shopify.py
import httpx
import logging
from typing import Optional, Type

from app.core.errors import CaptureError, CustomerLookupError, CustomerWriteError

logger = logging.getLogger("ishqme.shopify")


class ShopifyClient:
    """
    Thin async wrapper over the Shopify Admin REST customer endpoints.

    Every call is a single round trip with the configured timeout and no retry.
    Transport failures and non-2xx answers are raised as CustomerLookupError
    (search) or CustomerWriteError (create / update).
    """

    def __init__(
        self,
        store_url: str,
        access_token: str,
        api_version: str = "2023-04",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = f"{store_url.rstrip('/')}/admin/api/{api_version}"
        self.access_token = access_token
        self.timeout = timeout
        self._http = http_client

    def _headers(self) -> dict:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _send(
        self,
        method: str,
        path: str,
        error_cls: Type[CaptureError],
        **kwargs,
    ) -> dict:
        url = f"{self.base_url}{path}"
        try:
            if self._http is not None:
                response = await self._http.request(
                    method, url, headers=self._headers(), timeout=self.timeout, **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[Shopify] {method} {path} transport error: {e}")
            raise error_cls(f"Shopify request failed: {e}", url=url) from e

        if response.status_code >= 400:
            logger.error(f"[Shopify] {method} {path} -> {response.status_code} | {response.text}")
            raise error_cls(
                f"Shopify answered {response.status_code}",
                url=url,
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise error_cls("Invalid JSON from Shopify", url=url, upstream_status=response.status_code) from e

        if not isinstance(data, dict):
            raise error_cls(
                "Unexpected response shape from Shopify",
                url=url,
                upstream_status=response.status_code,
            )
        return data

    async def search_customer_by_email(self, email: str) -> Optional[dict]:
        """Return the customer whose email matches exactly, or None when there is none."""
        data = await self._send(
            "GET",
            "/customers/search.json",
            CustomerLookupError,
            params={"query": f"email:{email}"},
        )
        customers = data.get("customers")
        if not isinstance(customers, list):
            raise CustomerLookupError("Search response carried no 'customers' list")

        wanted = email.strip().lower()
        for customer in customers:
            if isinstance(customer, dict) and (customer.get("email") or "").strip().lower() == wanted:
                logger.debug(f"[Shopify] Found customer {customer.get('id')} for {email}")
                return customer
        return None

    async def create_customer(self, customer: dict) -> dict:
        data = await self._send("POST", "/customers.json", CustomerWriteError, json={"customer": customer})
        created = data.get("customer")
        if not isinstance(created, dict) or not created:
            raise CustomerWriteError("Create response carried no customer")
        logger.info(f"[Shopify] Customer created | id={created.get('id')} | email={created.get('email')}")
        return created

    async def update_customer(self, customer_id, fields: dict) -> dict:
        payload = {"customer": {"id": customer_id, **fields}}
        data = await self._send("PUT", f"/customers/{customer_id}.json", CustomerWriteError, json=payload)
        updated = data.get("customer")
        if not isinstance(updated, dict) or not updated:
            raise CustomerWriteError("Update response carried no customer")
        logger.info(f"[Shopify] Customer updated | id={customer_id} | fields={sorted(fields)}")
        return updated
