from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..core.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS


@dataclass
class ApiConfig:
    base_url: str
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS


class ApiConnection:
    """Singleton-like HTTP session factory for the attendance server.

    Note: One pooled `requests.Session` is shared by every gateway.
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        """Return the shared connection.

        Only the config of the first call is used; later configs are ignored
        until `_instance` is reset.
        """
        if cls._instance is None:
            cls._instance = ApiConnection(config)
        return cls._instance

    @property
    def timeout(self) -> float:
        return float(self._config.timeout)

    def url_for(self, endpoint: str) -> str:
        return f"{self._config.base_url.rstrip('/')}{endpoint}"

    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
