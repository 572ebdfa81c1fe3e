from __future__ import annotations
from typing import Optional, Dict, Any, Union
from pathlib import Path
from os import getenv
import yaml
import time
import logging

from .providers.base import PinningProvider, JsonPinRequest, FilePinRequest, PinResult, PinError
from .providers.pinata import PinataProvider

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parents[2] / "config" / "config.yaml"
DEFAULT_JSON_METADATA_NAME = "test.json"
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_PORT = 3000

PROVIDER_TYPES = {
    "pinata": PinataProvider,
}


def resolve_config_path() -> Path:
    return Path(getenv("PIN_RELAY_CONFIG", str(DEFAULT_CONFIG_PATH)))


class PinningManager:
    def __init__(self, config_path: Union[Path, str]):
        self.config_path = Path(config_path)
        self.config = self.load_config(self.config_path)
        self._provider: Optional[PinningProvider] = None
        self._stats = {} #per-operation call tracking

        pinning_cfg = self.config["pinning"]
        self.provider_name = pinning_cfg["provider"]
        self.json_metadata_name = pinning_cfg.get("json_metadata_name") or DEFAULT_JSON_METADATA_NAME
        self.upload_dir = Path(pinning_cfg.get("upload_dir") or DEFAULT_UPLOAD_DIR)

    @staticmethod
    def load_config(config_path: Union[Path, str]) -> Dict:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        if 'providers' not in config:
            raise ValueError("Config missing 'providers'")
        if 'pinning' not in config:
            raise ValueError("Config missing 'pinning'")

        for name, provider_cfg in config['providers'].items():
            if 'type' not in provider_cfg:
                raise ValueError(f"Provider '{name}' missing type")
            if provider_cfg['type'] not in PROVIDER_TYPES:
                raise ValueError(f"Provider '{name}' has unknown type '{provider_cfg['type']}'")

        provider_name = config['pinning'].get('provider')
        if not provider_name:
            raise ValueError("Pinning config missing provider")
        if provider_name not in config['providers']:
            raise ValueError(f"Pinning config references unknown provider '{provider_name}'")

        return config

    @property
    def server_settings(self) -> Dict[str, Any]:
        server = dict(self.config.get("server") or {})
        server["port"] = int(getenv("PORT") or server.get("port") or DEFAULT_PORT)
        server.setdefault("host", "0.0.0.0")
        server.setdefault("log_level", "info")
        return server

    @property
    def provider(self) -> PinningProvider:
        if self._provider is None:
            provider_cfg = self.config["providers"][self.provider_name]
            settings = provider_cfg.get("settings") or {}
            provider = PROVIDER_TYPES[provider_cfg["type"]](**settings)
            if getattr(provider, "has_credentials", True) is False:
                logger.warning(f"provider '{self.provider_name}' has no credentials; pin calls will fail")
            self._provider = provider
            logger.info(f"initialized provider: {self.provider_name}")
        return self._provider

    async def pin_json(self, payload: Dict[str, Any], name: Optional[str] = None) -> PinResult:
        request = JsonPinRequest(content=payload, name=name or self.json_metadata_name)
        return await self._dispatch("pin_json", self.provider.pin_json, request)

    async def pin_file(self, path: Union[Path, str], filename: str) -> PinResult:
        request = FilePinRequest(path=path, filename=filename)
        return await self._dispatch("pin_file", self.provider.pin_file, request)

    async def _dispatch(self, operation: str, call, request) -> PinResult:
        start_time = time.perf_counter()
        try:
            result = await call(request)
        except PinError:
            self._track_stats(operation, (time.perf_counter() - start_time) * 1000, success=False)
            raise
        self._track_stats(operation, (time.perf_counter() - start_time) * 1000, success=True)
        logger.info(f"{operation} pinned {result.cid}")
        return result

    def _track_stats(self, operation: str, latency_ms: float, success: bool):
        if operation not in self._stats:
            self._stats[operation] = {
                'total_calls': 0,
                'successful_calls': 0,
                'total_latency_ms': 0
            }

        stats = self._stats[operation]
        stats['total_calls'] += 1
        if success:
            stats['successful_calls'] += 1
            stats['total_latency_ms'] += latency_ms

    def get_stats(self, operation: Optional[str] = None) -> Dict:
        if operation:
            return self._stats.get(operation, {})
        return self._stats

    async def health_check(self) -> bool:
        return await self.provider.health_check()

    async def cleanup(self):
        if self._provider is None:
            return
        try:
            await self._provider.aclose()
            logger.info(f"Cleaned up provider: {self.provider_name}")
        except Exception as e:
            logger.error(f"Cleanup failed for {self.provider_name}: {e}")
        self._provider = None
