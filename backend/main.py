import logging
import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

from api import create_app
from config import get_config

config = get_config()
if config.debug:
    logging.getLogger().setLevel(logging.DEBUG)

app = create_app(config)

if __name__ == "__main__":
    logger.info(f"Starting Echo Digest on {config.host}:{config.port}")
    if config.proxy_url:
        logger.info(f"Forwarding outbound requests via {config.proxy_url}")
    uvicorn.run(app, host=config.host, port=config.port)
