from __future__ import annotations
from typing import Any, Dict, Optional
import json
import time
import logging
from os import getenv

import httpx

from .base import (
    PinningProvider, JsonPinRequest, FilePinRequest, PinResult,
    PinError, UpstreamAuthError, UpstreamNetworkError, UpstreamRejectionError,
)

logger = logging.getLogger(__name__)

AUTH_STATUS = {401, 403}

class PinataProvider(PinningProvider):
    def __init__(self, base_url: str = "https://api.pinata.cloud", jwt: Optional[str] = None, timeout: float = 60.0, cid_version: Optional[int] = None, **kwargs):
        self.base_url = base_url.rstrip("/")
        self.jwt = (jwt or getenv("PINATA_JWT") or "").strip() or None
        self.timeout = timeout
        self.cid_version = cid_version

        headers = {"Authorization": f"Bearer {self.jwt}"} if self.jwt else {}
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            **kwargs
        )

    @property
    def has_credentials(self) -> bool:
        return self.jwt is not None

    def _options(self, cid_version: Optional[int]) -> Optional[Dict[str, Any]]:
        version = cid_version if cid_version is not None else self.cid_version
        if version is None:
            return None
        return {"cidVersion": version}

    async def _send(self, operation: str, method: str, url: str, **request_kwargs) -> httpx.Response:
        if not self.has_credentials:
            raise UpstreamAuthError("Pinata JWT is not configured (set PINATA_JWT)")
        try:
            response = await self.client.request(method, url, **request_kwargs)
        except httpx.TimeoutException as e:
            raise UpstreamNetworkError(f"Pinata {operation} timed out after {self.timeout}s: {e}") from e
        except httpx.TransportError as e:
            raise UpstreamNetworkError(f"Pinata {operation} request failed: {e}") from e

        if response.status_code in AUTH_STATUS:
            logger.error(f"Pinata {operation} rejected credentials: {response.status_code} {response.text}")
            raise UpstreamAuthError(f"Pinata {operation} returned {response.status_code}")
        if response.is_error:
            logger.error(f"Pinata {operation} failed: {response.status_code} {response.text}")
            raise UpstreamRejectionError(f"Pinata {operation} returned {response.status_code}: {response.text[:500]}")
        return response

    def _to_result(self, operation: str, response: httpx.Response, started: float) -> PinResult:
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamRejectionError(f"Pinata {operation} returned a non-JSON body") from e

        cid = data.get("IpfsHash") if isinstance(data, dict) else None
        if not cid:
            raise UpstreamRejectionError(f"Pinata {operation} response missing IpfsHash: {data}")

        meta = {"provider": "pinata", "operation": operation, "latency": time.perf_counter() - started}
        return PinResult(
            cid=cid,
            raw=data,
            meta=meta,
            pin_size=data.get("PinSize"),
            timestamp=data.get("Timestamp"),
        )

    async def pin_json(self, req: JsonPinRequest) -> PinResult:
        body: Dict[str, Any] = {
            "pinataContent": req.content,
            "pinataMetadata": {"name": req.name},
        }
        options = self._options(req.cid_version)
        if options:
            body["pinataOptions"] = options

        t0 = time.perf_counter()
        response = await self._send("pinJSONToIPFS", "POST", "/pinning/pinJSONToIPFS", json=body)
        return self._to_result("pinJSONToIPFS", response, t0)

    async def pin_file(self, req: FilePinRequest) -> PinResult:
        data = {"pinataMetadata": json.dumps({"name": req.filename})}
        options = self._options(req.cid_version)
        if options:
            data["pinataOptions"] = json.dumps(options)

        t0 = time.perf_counter()
        try:
            with open(req.path, "rb") as stream:
                response = await self._send(
                    "pinFileToIPFS", "POST", "/pinning/pinFileToIPFS",
                    files={"file": (req.filename, stream)},
                    data=data,
                )
        except OSError as e:
            raise PinError(f"Could not read staged file {req.path}: {e}") from e
        return self._to_result("pinFileToIPFS", response, t0)

    async def health_check(self) -> bool:
        try:
            await self._send("testAuthentication", "GET", "/data/testAuthentication")
            return True
        except PinError:
            return False

    async def aclose(self) -> None:
        await self.client.aclose()
