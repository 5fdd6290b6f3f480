"""
This module provides `ConsoleHTTPAdapter`, a custom HTTPAdapter that enforces
a minimum TLS version and carries the opt-in retry policy of the client
"""

import ssl
from typing import Any, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.poolmanager import PoolManager
from urllib3.util.retry import Retry


RETRY_STATUSES = (502, 503, 504)


class ConsoleHTTPAdapter(HTTPAdapter):
    """
    Custom HTTPAdapter that uses a secure SSL context for requests
    Retries are disabled unless a positive count is given; POST is never retried
    """

    def __init__(
        self, retries: int = 0, backoff_factor: float = 0.0, verify: bool = True
    ) -> None:
        self.verify = verify
        super().__init__(max_retries=self.build_retry(retries, backoff_factor))

    @staticmethod
    def build_retry(retries: int, backoff_factor: float = 0.0) -> Retry:
        """
        Build the urllib3 retry policy

        Args:
            retries (int): Number of retries, 0 disables them
            backoff_factor (float): Backoff factor between attempts

        Returns:
            Retry: Retry policy for the adapter
        """
        if retries <= 0:
            return Retry(0, read=False)

        # The last failed response is handed back instead of raising
        return Retry(
            total=retries,
            backoff_factor=backoff_factor,
            status_forcelist=RETRY_STATUSES,
            raise_on_status=False,
        )

    def init_poolmanager(
        self, connections: int, maxsize: int, block: bool = False, **pool_kwargs: Any
    ) -> PoolManager:
        """
        Initializes the connection pool manager with a custom SSL context

        Args:
            connections (int): The number of connections to cache
            maxsize (int): The maximum number of connections to pool
            block (bool): Whether to block when the pool is full
            **pool_kwargs (Any): Additional keyword arguments for the pool manager

        Returns:
            PoolManager: A configured connection pool manager
        """
        context = ssl.create_default_context()
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        context.load_default_certs()
        if not self.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        pool_kwargs["ssl_context"] = context
        return super().init_poolmanager(  # type: ignore
            connections, maxsize, block=block, **pool_kwargs
        )


def build_session(
    api_url: str,
    retries: int = 0,
    backoff_factor: float = 0.0,
    ssl_cert: Union[str, bool] = True,
) -> requests.Session:
    """
    Creates a `requests.Session` with the custom adapter mounted on the API URL

    Args:
        api_url (str): Prefix the adapter is mounted on
        retries (int): Number of retries, 0 disables them
        backoff_factor (float): Backoff factor between attempts
        ssl_cert (Union[str, bool]): CA bundle path, or whether to verify certificates

    Returns:
        requests.Session: A fresh session, to be closed by the caller
    """
    session = requests.Session()
    session.verify = ssl_cert
    adapter = ConsoleHTTPAdapter(
        retries, backoff_factor, verify=ssl_cert is not False
    )
    session.mount(api_url, adapter)
    return session
