from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Union

#unified pinning errors
class PinError(RuntimeError): ...
class UpstreamAuthError(PinError): ...
class UpstreamNetworkError(PinError): ...
class UpstreamRejectionError(PinError): ...

@dataclass(frozen=True)
class JsonPinRequest:
    content: Dict[str, Any]
    name: str #metadata label attached before forwarding
    cid_version: Optional[int] = None

@dataclass(frozen=True)
class FilePinRequest:
    path: Union[Path, str] #temporary on-disk copy of the upload
    filename: str #original filename, used as metadata label
    cid_version: Optional[int] = None

@dataclass(frozen=True)
class PinResult:
    cid: str
    raw: Any #provider-native response payload
    meta: Dict[str, Any] = field(default_factory=dict) #provider, latency, etc.
    pin_size: Optional[int] = None
    timestamp: Optional[str] = None

class PinningProvider(ABC):
    @abstractmethod
    async def pin_json(self, req: JsonPinRequest) -> PinResult:
        raise NotImplementedError

    @abstractmethod
    async def pin_file(self, req: FilePinRequest) -> PinResult:
        raise NotImplementedError

    @abstractmethod
    async def health_check(self) -> bool:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
