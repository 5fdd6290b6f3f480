"""
Controller module for managing consoles
Provides functionality to interact with console resources via API
"""

from typing import Any, Dict, Optional, Union, override

from controller_base import ControllerBase, Payload
from models import Console, Entity


class ConsoleController(ControllerBase[Console]):
    """
    Controller for Console entities. Handles API interactions for console resources
    The backend stores the lifecycle flag as "isActive" (1/0), the model exposes it
    as the boolean "active"
    """

    CREATE_FIELDS = ("name", "manufacturer", "serial_number")

    def __init__(
        self,
        api_url: str,
        ssl_cert: Union[str, bool] = True,
        timeout: Optional[float] = None,
        retries: int = 0,
        backoff_factor: float = 0.0,
    ) -> None:
        super().__init__(
            api_url,
            model_class=Console,
            ssl_cert=ssl_cert,
            timeout=timeout,
            retries=retries,
            backoff_factor=backoff_factor,
        )

    @override
    def field_mapping(self) -> Dict[str, str]:
        return {
            "id": "id",
            "name": "name",
            "manufacturer": "manufacturer",
            "serialNumber": "serial_number",
            "isActive": "active",
            "createdAt": "created_at",
            "updatedAt": "updated_at",
        }

    @override
    def mapper(self, data: Dict[str, Any]) -> Dict[str, Any]:
        mapped_data = super().mapper(data)
        mapped_data["active"] = bool(data.get("isActive"))
        return mapped_data

    @override
    def reverse_mapper(self, payload: Payload) -> Dict[str, Any]:
        data = payload.to_json() if isinstance(payload, Entity) else dict(payload)
        active = data.pop("active", None)

        mapped_json = super().reverse_mapper(data)

        if isinstance(active, bool):
            mapped_json["isActive"] = 1 if active else 0
        elif active is not None:
            self.logger.log_warning(
                f"Ignoring non boolean value {active!r} for 'active'"
            )

        return mapped_json

    def activate(self, resource_id: Union[str, int]) -> Console:
        """
        Mark a console as active

        Args:
            resource_id (Union[str, int]): ID of the console

        Returns:
            Console: Updated console
        """
        return self.update(resource_id, {"active": True})

    def deactivate(self, resource_id: Union[str, int]) -> Console:
        """
        Mark a console as inactive. The record is kept, see delete for removal

        Args:
            resource_id (Union[str, int]): ID of the console

        Returns:
            Console: Updated console
        """
        return self.update(resource_id, {"active": False})
