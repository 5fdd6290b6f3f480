"""In-memory consoles backend served through responses callbacks"""

import json
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse

import responses

Reply = Tuple[int, Dict[str, str], str]

JSON_HEADERS = {"Content-Type": "application/json"}
START = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)


class FakeConsoleBackend:
    """
    Serves /consoles the way the real backend does: numeric ids, isActive as 1/0,
    {meta, consoles} pages and {message, console} envelopes
    """

    def __init__(self, api_url: str) -> None:
        self.base_url = f"{api_url}/consoles"
        self.records: Dict[int, Dict[str, Any]] = {}
        self.next_id = 1
        self.clock = START

    def register(self, rsps: responses.RequestsMock) -> None:
        """Register the callbacks of every route on a RequestsMock"""
        collection = re.compile(rf"^{re.escape(self.base_url)}(\?.*)?$")
        item = re.compile(rf"^{re.escape(self.base_url)}/([^/?]+)$")

        rsps.add_callback(responses.GET, collection, callback=self.list_consoles)
        rsps.add_callback(responses.POST, collection, callback=self.create_console)
        rsps.add_callback(responses.GET, item, callback=self.get_console)
        rsps.add_callback(responses.PUT, item, callback=self.update_console)
        rsps.add_callback(responses.DELETE, item, callback=self.delete_console)

    def seed(self, names: List[str], inactive: Optional[List[str]] = None) -> None:
        """Store one console per name, those in inactive with isActive 0"""
        for index, name in enumerate(names):
            record = self._store(
                {
                    "name": name,
                    "manufacturer": "Acme",
                    "serialNumber": f"SN-{index:03d}",
                }
            )
            if inactive and name in inactive:
                record["isActive"] = 0

    def _tick(self) -> str:
        self.clock += timedelta(seconds=1)
        return self.clock.isoformat(timespec="milliseconds")

    def _store(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = self._tick()
        record = {
            "id": self.next_id,
            "name": fields["name"],
            "manufacturer": fields["manufacturer"],
            "serialNumber": fields["serialNumber"],
            "isActive": 1,
            "createdAt": now,
            "updatedAt": now,
        }
        self.records[self.next_id] = record
        self.next_id += 1
        return record

    @staticmethod
    def _reply(status: int, body: Any = None) -> Reply:
        return status, JSON_HEADERS, "" if body is None else json.dumps(body)

    def _find(self, url: str) -> Optional[Dict[str, Any]]:
        raw_id = urlparse(url).path.rsplit("/", 1)[-1]
        return self.records.get(int(raw_id)) if raw_id.isdigit() else None

    def _not_found(self) -> Reply:
        return self._reply(404, {"message": "Console not found"})

    def _validate(
        self, fields: Dict[str, Any], own_id: Optional[int] = None
    ) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}
        for key in ("name", "manufacturer", "serialNumber"):
            if own_id is None and not fields.get(key):
                errors.setdefault(key, []).append("required")
        serial = fields.get("serialNumber")
        if serial and any(
            r["serialNumber"] == serial and r["id"] != own_id
            for r in self.records.values()
        ):
            errors.setdefault("serialNumber", []).append("unique")
        return errors

    def list_consoles(self, request: Any) -> Reply:
        query = {k: v[0] for k, v in parse_qs(urlparse(request.url).query).items()}
        page = int(query.get("page", "1"))
        limit = int(query.get("limit", "10"))

        records = list(self.records.values())
        if "is_active" in query:
            records = [r for r in records if r["isActive"] == int(query["is_active"])]
        elif query.get("includeInactive") != "1":
            records = [r for r in records if r["isActive"] == 1]

        term = query.get("search", "").lower()
        if term:
            records = [
                r
                for r in records
                if any(
                    term in str(r[k]).lower()
                    for k in ("name", "manufacturer", "serialNumber")
                )
            ]

        sort_by = query.get("sortBy", "id")
        records.sort(
            key=lambda r: r[sort_by], reverse=query.get("sortOrder") == "desc"
        )

        total = len(records)
        last_page = max(1, math.ceil(total / limit))

        def page_url(number: int) -> str:
            return f"/?{urlencode({'page': number})}"

        meta = {
            "total": total,
            "per_page": limit,
            "current_page": page,
            "last_page": last_page,
            "first_page": 1,
            "first_page_url": page_url(1),
            "last_page_url": page_url(last_page),
            "next_page_url": page_url(page + 1) if page < last_page else None,
            "prev_page_url": page_url(page - 1) if page > 1 else None,
        }
        start = (page - 1) * limit
        page_records = records[start : start + limit]
        return self._reply(200, {"meta": meta, "consoles": page_records})

    def get_console(self, request: Any) -> Reply:
        record = self._find(request.url)
        if record is None:
            return self._not_found()
        return self._reply(200, {"message": "Console found", "console": record})

    def create_console(self, request: Any) -> Reply:
        fields = json.loads(request.body or "{}")
        errors = self._validate(fields)
        if errors:
            return self._reply(422, {"message": "Validation failed", "errors": errors})
        record = self._store(fields)
        return self._reply(201, {"message": "Console created", "console": record})

    def update_console(self, request: Any) -> Reply:
        record = self._find(request.url)
        if record is None:
            return self._not_found()
        fields = json.loads(request.body or "{}")
        errors = self._validate(fields, own_id=record["id"])
        if errors:
            return self._reply(422, {"message": "Validation failed", "errors": errors})
        for key in ("name", "manufacturer", "serialNumber", "isActive"):
            if key in fields:
                record[key] = fields[key]
        record["updatedAt"] = self._tick()
        return self._reply(200, {"message": "Console updated", "console": record})

    def delete_console(self, request: Any) -> Reply:
        record = self._find(request.url)
        if record is None:
            return self._not_found()
        del self.records[record["id"]]
        return self._reply(204)
