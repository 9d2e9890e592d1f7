import logging
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .interfaces import TMDBClientInterface, TMDBResponse, TMDBConfig, TMDBError

logger = logging.getLogger(__name__)

# Statuses retried when max_retries > 0; TMDB answers 429 when rate limited
RETRY_STATUSES = (429, 500, 502, 503, 504)


def build_session(max_retries: int) -> requests.Session:
    """Pooled session retrying idempotent GETs with backoff"""
    session = requests.Session()
    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=0.5,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class TMDBClient(TMDBClientInterface):
    """HTTP client for the TMDB v3 API"""

    def __init__(self, config: TMDBConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or build_session(config.max_retries)
        self.session.headers.update({"accept": "application/json"})

    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    @staticmethod
    def _status_message(response: requests.Response) -> str:
        # TMDB error bodies look like {"status_code": 7, "status_message": "..."}
        try:
            return response.json().get("status_message") or response.text
        except ValueError:
            return response.text

    def make_request(self, endpoint: str, params: Dict = None) -> TMDBResponse:
        """GET an endpoint; non-200 answers come back unsuccessful, transport errors raise"""
        url = self._url(endpoint)
        query = dict(params or {})
        query["api_key"] = self.config.api_key
        if self.config.language:
            query["language"] = self.config.language

        logger.info(f"TMDB request: {endpoint}")
        try:
            response = self.session.get(url, params=query, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"TMDB request to {endpoint} failed: {str(e)}")
            raise TMDBError(f"Request failed: {str(e)}")

        if response.status_code != 200:
            logger.error(f"TMDB {endpoint} answered {response.status_code}: {self._status_message(response)}")
            return TMDBResponse({}, response.status_code, False)

        try:
            return TMDBResponse(response.json(), response.status_code, True)
        except ValueError as e:
            logger.error(f"Invalid JSON from TMDB {endpoint}: {str(e)}")
            raise TMDBError(f"Invalid response body: {str(e)}", response.status_code)

    def close(self) -> None:
        self.session.close()
