"""
On-chain task completion log.

Best-effort telemetry: each completed task is recorded as a zero-value
self-transfer whose data field carries a hex-encoded JSON message. The
transaction is submitted with `eth_sendTransaction` to a JSON-RPC node that
manages the sender account. Any failure is logged and swallowed.
"""

import json
import logging
from itertools import count
from typing import Any, Dict, Optional

import httpx

from config.settings import ChainSettings
from domain.value_objects import utcnow

logger = logging.getLogger(__name__)

TASK_COMPLETED_EVENT = "TASK_COMPLETED"


class ChainRPCError(Exception):
    """JSON-RPC call returned an error object."""

    def __init__(self, error: Any):
        if not isinstance(error, dict):
            error = {"message": str(error)}
        self.code = error.get("code")
        self.message = error.get("message", "unknown error")
        super().__init__(f"RPC error {self.code}: {self.message}")


def encode_message(message: Dict[str, Any]) -> str:
    """Hex-encode a JSON message for a transaction data field."""
    raw = json.dumps(message, separators=(",", ":")).encode("utf-8")
    return "0x" + raw.hex()


class ChainLogger:
    """
    Submits task completion records to an EVM JSON-RPC node.

    Usage:
        chain_logger = ChainLogger(settings.chain)
        tx_hash = await chain_logger.log_task_completion(task_id, employee_id, org_id)
        await chain_logger.aclose()
    """

    def __init__(
        self,
        settings: ChainSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: RPC endpoint, sender and timeout.
            client: Optional preconfigured HTTP client. When omitted, one is
                created lazily and owned by this logger.
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None
        self._ids = count(1)

        if not settings.is_configured:
            logger.warning(
                "[Chain] CHAIN_RPC_URL / CHAIN_FROM_ADDRESS not set. "
                "On-chain logging is disabled."
            )

    @property
    def enabled(self) -> bool:
        return self._settings.is_configured

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.timeout, connect=5.0)
            )
        return self._client

    async def _rpc(self, method: str, params: list) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        response = await self._get_client().post(self._settings.rpc_url, json=payload)
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict):
            raise ChainRPCError(f"malformed response: {body!r}")
        if body.get("error"):
            raise ChainRPCError(body["error"])
        return body.get("result")

    async def log_task_completion(
        self,
        task_id: str,
        employee_id: str,
        org_id: str,
    ) -> Optional[str]:
        """
        Record a task completion on-chain.

        Returns:
            Transaction hash, or None when disabled or on any failure.
        """
        if not self.enabled:
            return None

        logger.info(f"[Chain] Preparing to log task {task_id} on-chain")

        message = {
            "event": TASK_COMPLETED_EVENT,
            "taskId": task_id,
            "employeeId": employee_id,
            "orgId": org_id,
            "timestamp": utcnow().isoformat() + "Z",
        }
        sender = self._settings.from_address
        transaction = {
            "from": sender,
            "to": sender,
            "value": "0x0",
            "data": encode_message(message),
        }

        try:
            tx_hash = await self._rpc("eth_sendTransaction", [transaction])
        except (httpx.HTTPError, ChainRPCError, ValueError) as e:
            logger.error(f"[Chain] Failed to log task {task_id} on-chain: {e}")
            return None

        logger.info(f"[Chain] Task {task_id} logged, transaction hash: {tx_hash}")
        return tx_hash

    async def aclose(self) -> None:
        """Close the HTTP client if this logger created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
