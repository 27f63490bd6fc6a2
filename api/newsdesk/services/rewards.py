"""Client for the external rewards / identity API."""

import logging
from dataclasses import dataclass

import httpx

from newsdesk.config import settings
from newsdesk.errors import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "rewards_api"


@dataclass(frozen=True)
class ExternalProfile:
    """Publisher profile as returned by the external login call."""

    success: bool
    message: str
    external_id: int | None = None
    name: str = ""
    number: str = ""
    balance: float = 0.0
    status: str = ""
    referral_code: str = ""


@dataclass(frozen=True)
class RewardReceipt:
    """Outcome reported by the external system for a reward request."""

    success: bool
    message: str


class RewardsClient:
    """
    Thin async wrapper around the rewards API.

    Every call is bounded by ``timeout`` seconds. Transport errors, HTTP
    error statuses and undecodable bodies raise ``ExternalServiceError``;
    a well-formed ``success: false`` answer is returned to the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _post(self, path: str, payload: dict) -> dict:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.TimeoutException as exc:
            raise ExternalServiceError(
                SERVICE_NAME, f"Rewards API timed out after {self.timeout}s", path=path
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                SERVICE_NAME,
                f"Rewards API returned HTTP {exc.response.status_code}",
                path=path,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(
                SERVICE_NAME, f"Rewards API request failed: {exc}", path=path
            ) from exc
        except ValueError as exc:
            raise ExternalServiceError(
                SERVICE_NAME, "Rewards API returned an invalid response body", path=path
            ) from exc

        if not isinstance(body, dict):
            raise ExternalServiceError(
                SERVICE_NAME, "Rewards API returned an invalid response body", path=path
            )
        return body

    async def login(self, number: str, password: str) -> ExternalProfile:
        """Authenticate a publisher against the external system."""
        body = await self._post("/login", {"number": number, "password": password})
        data = body.get("data") or {}
        return ExternalProfile(
            success=bool(body.get("success")),
            message=body.get("message") or "",
            external_id=data.get("id"),
            name=data.get("name") or "",
            number=data.get("number") or number,
            balance=float(data.get("balance") or 0),
            status=data.get("status") or "",
            referral_code=data.get("reff_code") or "",
        )

    async def send_reward(self, external_id: int, amount: float) -> RewardReceipt:
        """Ask the external system to credit ``amount`` to a publisher."""
        logger.info("Sending reward of %s to external user %s", amount, external_id)
        body = await self._post("/reward", {"user_id": external_id, "amount": amount})
        return RewardReceipt(
            success=bool(body.get("success")),
            message=body.get("message") or "",
        )


def get_rewards_client() -> RewardsClient:
    """Dependency that provides a rewards client built from settings."""
    return RewardsClient(
        base_url=settings.rewards_api_base_url,
        timeout=settings.rewards_timeout_seconds,
    )
