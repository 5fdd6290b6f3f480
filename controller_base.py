"""
Base controller module for API interactions
Provides generic methods for paginated listing and CRUD operations on resources
"""

from abc import ABC
from dataclasses import replace
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import quote, urlencode

import requests

from http_session import build_session
from logger import Logger
from models import READ_ONLY_FIELDS, Entity, ListQuery, PageMeta, PageResult
from service_error import ServiceError

T = TypeVar("T", bound=Entity)

Payload = Union[Dict[str, Any], Entity]


class ControllerBase(ABC, Generic[T]):
    """
    Abstract base class for controllers. Implements generic CRUD operations
    and provides utility methods for API interactions
    """

    STATUS_PARAM = "is_active"
    INCLUDE_INACTIVE_PARAM = "includeInactive"
    CREATE_FIELDS: Tuple[str, ...] = ("name",)

    def __init__(
        self,
        api_url: str,
        model_class: Type[T],
        ssl_cert: Union[str, bool] = True,
        timeout: Optional[float] = None,
        retries: int = 0,
        backoff_factor: float = 0.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.model_class = model_class
        self.ssl_cert = ssl_cert
        self.timeout = timeout
        self.retries = retries
        self.backoff_factor = backoff_factor
        self.item_key = model_class.__name__.lower()
        self.resource = f"{self.item_key}s"
        self.logger = Logger(model_class.__name__)

    @property
    def base_url(self) -> str:
        """URL of the resource collection"""
        return f"{self.api_url}/{self.resource}"

    def resource_url(self, resource_id: Union[str, int]) -> str:
        """URL of a single resource, with the id percent-encoded"""
        return f"{self.base_url}/{quote(str(resource_id), safe='')}"

    def get_headers(self) -> Dict[str, str]:
        """
        Generate headers for API requests

        Returns:
            Dict[str, str]: Dictionary containing headers for API requests
        """
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def field_mapping(self) -> Dict[str, str]:
        """
        Define the mapping between API fields and model fields

        Returns:
            Dict[str, str]: Dictionary mapping API fields to model fields
        """
        return {
            "id": "id",
            "name": "name",
            "createdAt": "created_at",
            "updatedAt": "updated_at",
        }

    def reverse_field_mapping(self) -> Dict[str, str]:
        """Mapping from model fields back to API fields"""
        return {v: k for k, v in self.field_mapping().items()}

    def mapper(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map API response data to model fields

        Mapped keys are renamed, the others are kept under "extra" and the id
        always comes out as a string

        Args:
            data (Dict[str, Any]): API response data

        Returns:
            Dict[str, Any]: Mapped data with model field names
        """
        mapping = self.field_mapping()
        mapped_data: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}

        for key, value in data.items():
            if key in mapping:
                mapped_data[mapping[key]] = value
            else:
                extra[key] = value

        if mapped_data.get("id") is not None:
            mapped_data["id"] = str(mapped_data["id"])

        mapped_data["extra"] = extra
        return mapped_data

    def reverse_mapper(self, payload: Payload) -> Dict[str, Any]:
        """
        Map model fields to the API field names for write requests

        Read-only fields and None values are left out, unknown keys are sent as is

        Args:
            payload (Payload): Model instance or dictionary keyed by model field

        Returns:
            Dict[str, Any]: Body for the API request
        """
        data = payload.to_json() if isinstance(payload, Entity) else dict(payload)
        mapping = self.field_mapping()
        reverse_mapping = self.reverse_field_mapping()
        mapped_json: Dict[str, Any] = {}

        for key, value in data.items():
            if value is None:
                continue
            if key in READ_ONLY_FIELDS or mapping.get(key) in READ_ONLY_FIELDS:
                continue
            mapped_json[reverse_mapping.get(key, key)] = value

        return mapped_json

    def convert_to_model(
        self, data: Union[List[Dict[str, Any]], Dict[str, Any]]
    ) -> Union[List[T], T]:
        """
        Convert API response data to a model instance

        Args:
            data (Any): API response data

        Returns:
            Union[List[T], T]: Model instance or list of model instances
        """
        if isinstance(data, dict):
            instance = self.model_class()
            instance.from_json(self.mapper(data))
            return instance

        result: List[T] = []

        for item in data:
            instance = self.model_class()
            instance.from_json(self.mapper(item))
            result.append(instance)

        return result

    def build_list_url(self, query: ListQuery) -> str:
        """
        Build the list URL for a query

        The parameter order is fixed and exactly one of the status filter
        parameters is always present

        Args:
            query (ListQuery): List parameters

        Returns:
            str: URL of the requested page
        """
        params: List[Tuple[str, str]] = [
            ("page", str(query.page)),
            ("limit", str(query.limit)),
        ]

        if query.is_active is not None:
            params.append((self.STATUS_PARAM, "1" if query.is_active else "0"))
        else:
            params.append(
                (self.INCLUDE_INACTIVE_PARAM, "1" if query.include_inactive else "0")
            )

        if query.sort_by:
            sort_by = self.reverse_field_mapping().get(query.sort_by, query.sort_by)
            params.append(("sortBy", sort_by))
        if query.sort_order is not None:
            params.append(("sortOrder", query.sort_order.value))  # type: ignore
        if query.search:
            params.append(("search", query.search))

        return f"{self.base_url}?{urlencode(params)}"

    def send_request(
        self, method: str, url: str, payload: Optional[Dict[str, Any]] = None
    ) -> requests.Response:
        """
        Send a single request to the API

        Args:
            method (str): HTTP method
            url (str): Target URL
            payload (Optional[Dict[str, Any]]): JSON body, only sent with POST and PUT

        Raises:
            ServiceError: When no response could be obtained

        Returns:
            requests.Response: Raw response, whatever its status
        """
        body = payload if method in ("POST", "PUT") else None

        try:
            with build_session(
                self.api_url, self.retries, self.backoff_factor, self.ssl_cert
            ) as session:
                response = session.request(
                    method,
                    url,
                    json=body,
                    headers=self.get_headers(),
                    timeout=self.timeout,
                )
        except requests.RequestException as exc:
            self.logger.log_error(f"{method} {url} - Request failed: {exc}")
            raise ServiceError(f"Network error: {exc}") from exc

        self.logger.log_debug(
            f"{method} {url} - Response: {response.status_code} - {response.text}"
        )

        return response

    def handle_response(
        self,
        method: str,
        url: str,
        response: requests.Response,
        expect_body: bool = True,
    ) -> Any:
        """
        Check the status of a response and decode its body

        Args:
            method (str): HTTP method of the request, for logging
            url (str): URL of the request, for logging
            response (requests.Response): Raw response
            expect_body (bool): Whether a successful response carries JSON

        Raises:
            ServiceError: When the status is not a success

        Returns:
            Any: Decoded body, or None when no body is expected
        """
        if 200 <= response.status_code < 300:
            return response.json() if expect_body else None

        error = ServiceError.from_response(response)
        details = error.message.replace("\n", "; ")

        if response.status_code == 404:
            self.logger.log_warning(f"{method} {url} - Not found: {details}")
        elif response.status_code == 409:
            self.logger.log_warning(f"{method} {url} - Conflict: {details}")
        else:
            self.logger.log_error(
                f"{method} {url} - Error {response.status_code}: {details}"
            )

        raise error

    def unwrap(self, body: Any, key: str) -> Any:
        """
        Extract the payload from a response envelope

        Args:
            body (Any): Decoded response body
            key (str): Envelope key

        Raises:
            ValueError: When the envelope has no such key

        Returns:
            Any: Enveloped payload
        """
        if not isinstance(body, dict) or key not in body:
            raise ValueError(f"Response body has no '{key}' field")
        return body[key]

    def list(self, query: Optional[ListQuery] = None, **kwargs: Any) -> PageResult[T]:
        """
        Retrieve one page of resources

        Args:
            query (Optional[ListQuery]): List parameters, defaults to the first page
            **kwargs (Any): ListQuery fields, overriding those of query

        Returns:
            PageResult[T]: Resources of the page and pagination metadata
        """
        if query is None:
            query = ListQuery(**kwargs)
        elif kwargs:
            query = replace(query, **kwargs)

        url = self.build_list_url(query)
        body = self.handle_response("GET", url, self.send_request("GET", url))
        items = self.unwrap(body, self.resource)

        result = PageResult(
            items=self.convert_to_model(items) if items else [],  # type: ignore
            meta=PageMeta.from_json(body.get("meta")),
        )

        self.logger.log_info(
            f"Fetched {len(result)} {self.resource} "
            f"(page {result.meta.current_page}/{result.meta.last_page})"
        )

        return result

    def get(self, resource_id: Union[str, int]) -> T:
        """
        Retrieve a single resource by its ID

        Args:
            resource_id (Union[str, int]): ID of the resource to retrieve

        Returns:
            T: Retrieved resource as a model instance
        """
        url = self.resource_url(resource_id)
        body = self.handle_response("GET", url, self.send_request("GET", url))
        result = self.convert_to_model(self.unwrap(body, self.item_key))

        self.logger.log_info(f"Fetched {self.item_key} with ID {resource_id}")

        return result  # type: ignore

    def create(self, payload: Payload) -> T:
        """
        Create a new resource, sending only the fields accepted on creation

        Args:
            payload (Payload): Model instance or dictionary keyed by model or API field

        Returns:
            T: Created resource as a model instance
        """
        raw = payload.to_json() if isinstance(payload, Entity) else dict(payload)
        mapping = self.field_mapping()
        # API field names are accepted as well as model field names
        data = {mapping.get(k, k): v for k, v in raw.items()}
        ignored = sorted(k for k in data if k not in self.CREATE_FIELDS)
        if ignored:
            self.logger.log_debug(
                f"Ignoring fields not accepted on creation: {', '.join(ignored)}"
            )

        url = self.base_url
        body = self.reverse_mapper(
            {k: v for k, v in data.items() if k in self.CREATE_FIELDS}
        )
        response = self.send_request("POST", url, body)
        result = self.convert_to_model(
            self.unwrap(self.handle_response("POST", url, response), self.item_key)
        )

        self.logger.log_success(
            f"Created new {self.item_key} with ID {result.id}"  # type: ignore
        )

        return result  # type: ignore

    def update(self, resource_id: Union[str, int], payload: Payload) -> T:
        """
        Update an existing resource by its ID

        Args:
            resource_id (Union[str, int]): ID of the resource to update
            payload (Payload): Model instance or partial dictionary keyed by model field

        Returns:
            T: Updated resource as a model instance
        """
        url = self.resource_url(resource_id)
        response = self.send_request("PUT", url, self.reverse_mapper(payload))
        result = self.convert_to_model(
            self.unwrap(self.handle_response("PUT", url, response), self.item_key)
        )

        self.logger.log_success(f"Updated {self.item_key} with ID {resource_id}")

        return result  # type: ignore

    def delete(self, resource_id: Union[str, int]) -> None:
        """
        Permanently delete a resource by its ID

        Args:
            resource_id (Union[str, int]): ID of the resource to delete
        """
        url = self.resource_url(resource_id)
        self.handle_response(
            "DELETE", url, self.send_request("DELETE", url), expect_body=False
        )

        self.logger.log_success(f"Deleted {self.item_key} with ID {resource_id}")
