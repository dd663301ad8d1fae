"""
Network configuration for the Fuel Accounts SDK.
"""
import json
import logging
import os
import threading
from importlib import resources
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class NetworkConfig:
    """
    Known networks, loaded from the bundled networks.json.

    The file is read once and cached at class level.
    """

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None
    _lock = threading.RLock()

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        with cls._lock:
            if cls._networks_cache is None:
                path = resources.files("fuel_accounts_sdk") / "data" / "networks.json"
                with path.open("r", encoding="utf-8") as f:
                    cls._networks_cache = json.load(f)
                logger.debug(f"Loaded {len(cls._networks_cache)} networks")
            return cls._networks_cache

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get the configuration of network `name`.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{name}'. Available networks: {available}")
        return networks[name]

    @classmethod
    def get_rpc_url(cls, name: str, override: Optional[str] = None) -> str:
        """
        RPC URL of network `name`.

        Precedence: `override`, then $<NAME>_RPC_URL, then the bundled value.
        """
        network = cls.get_network(name)
        if override:
            return override
        env_key = f"{name.upper().replace('-', '_')}_RPC_URL"
        env_url = os.environ.get(env_key)
        if env_url:
            logger.debug(f"Using {env_key} for network {name}")
            return env_url
        return network["rpc"]

    @classmethod
    def get_chain_id(cls, name: str) -> int:
        return int(cls.get_network(name)["chainId"])
