"""
Query Module – forwards a clicked map coordinate to the query endpoint.

The request runs on a daemon thread so the map's event loop never waits on
the network; the response is only logged.
"""

import logging
import threading

import requests

import config

logger = logging.getLogger(__name__)


class HttpQueryClient:

    def __init__(self, url: str = None, timeout: float = config.HTTP_TIMEOUT):
        self.url = url or config.QUERY_URL
        self.timeout = timeout

    def __call__(self, lat: float, lon: float) -> threading.Thread:
        thread = threading.Thread(target=self.send, args=(lat, lon), daemon=True)
        thread.start()
        return thread

    def send(self, lat: float, lon: float):
        try:
            resp = requests.get(self.url, params={"lat": lat, "lon": lon}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Query for (%s, %s) failed: %s", lat, lon, e)
            return None
        logger.info("Query for (%s, %s) -> HTTP %s", lat, lon, resp.status_code)
        return resp
