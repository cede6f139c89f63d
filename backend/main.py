import os
import logging
import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

if os.environ.get("DEBUG", "0") == "1":
    logging.getLogger().setLevel(logging.DEBUG)

from api import create_app
from config import get_config, create_snapshot_store

config = get_config()
app = create_app(snapshot_store=create_snapshot_store(config))

if __name__ == "__main__":
    logger.info(f"Starting TextDiff Analyzer on {config.host}:{config.port}")
    logger.info(f"Diff lookahead window: {config.diff_lookahead} tokens, cache size: {config.diff_cache_size}")
    uvicorn.run(app, host=config.host, port=config.port)
