import os
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_LOOKAHEAD = 4
DEFAULT_CACHE_SIZE = 512
DEFAULT_GROUP_NAME = "Default Group"


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.diff_lookahead = int(os.environ.get("DIFF_LOOKAHEAD", DEFAULT_LOOKAHEAD))
        self.diff_cache_size = int(os.environ.get("DIFF_CACHE_SIZE", DEFAULT_CACHE_SIZE))
        self.default_group_name = os.environ.get("DEFAULT_GROUP_NAME", DEFAULT_GROUP_NAME)
        self.snapshot_path = os.environ.get("SNAPSHOT_PATH", "").strip() or None

        if self.diff_lookahead < 1:
            logger.warning(f"DIFF_LOOKAHEAD={self.diff_lookahead} is invalid, using {DEFAULT_LOOKAHEAD}")
            self.diff_lookahead = DEFAULT_LOOKAHEAD

    def reload(self) -> None:
        """Re-read the environment (used by tests that patch variables)."""
        self._initialize()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "diff_lookahead": self.diff_lookahead,
            "diff_cache_size": self.diff_cache_size,
            "default_group_name": self.default_group_name,
            "persistence": "json" if self.snapshot_path else "memory",
        }


config = Config()


def get_config() -> Config:
    return config


def create_snapshot_store(cfg: Config):
    """Create the snapshot persistence adapter, or None when SNAPSHOT_PATH is unset."""
    if not cfg.snapshot_path:
        logger.info("Snapshot persistence disabled (state kept in memory)")
        return None

    from adapters.local.json_snapshot_store import JsonFileSnapshotStore
    store = JsonFileSnapshotStore(cfg.snapshot_path)
    logger.info(f"Snapshot persistence: {type(store).__name__} -> {cfg.snapshot_path}")
    return store
