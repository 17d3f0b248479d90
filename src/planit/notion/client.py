# src/planit/notion/client.py

"""
Notion REST client.

Only the three calls the widget needs:
- query the tasks database for open tasks due today or earlier,
- flip a task's checkbox,
- list the databases the integration can see.

A fresh httpx.AsyncClient is opened per call so the client can be used from
any event loop (Textual's loop, or asyncio.run() in the console front end).
No retries: every failure is reported to the caller as NotionError.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

import httpx

from ..tasks.task_models import DataSource, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.notion.com"
DEFAULT_NOTION_VERSION = "2022-06-28"

# Property names expected in the tasks database.
PROP_TITLE = "Task Name"
PROP_CHECKBOX = "Checkbox"
PROP_DATE = "Date"
PROP_OBJECTIVE_NAME = "Objective Name"
PROP_OBJECTIVE_DEADLINE = "Objective Deadline"

_SNIPPET_CHARS = 500


class NotionError(RuntimeError):
    """Any failure talking to Notion (transport, HTTP status, payload)."""


class NotionAPIError(NotionError):
    """Notion answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


def friendly_notion_error_message(err: Exception) -> str:
    if isinstance(err, NotionAPIError):
        if err.status_code == 401:
            return "Notion rejected the integration token. Check it in Settings."
        if err.status_code == 403:
            return "The integration has no access to this database. Share the database with it in Notion."
        if err.status_code == 404:
            return "Database not found. Check the database ID and that it is shared with the integration."
        if err.status_code == 429:
            return "Notion is rate-limiting requests. Try again in a moment."
    msg = str(err).strip()
    return msg or "Notion request failed."


# ---- payload helpers ----


def _first_plain_text(rich: Any) -> str | None:
    if not isinstance(rich, list) or not rich:
        return None
    first = rich[0]
    if not isinstance(first, dict):
        return None
    text = first.get("plain_text")
    return text if isinstance(text, str) else None


def _date_start(value: Any) -> str | None:
    if not isinstance(value, dict):
        return None
    start = value.get("start")
    return start if isinstance(start, str) and start else None


def _rollup_array_title(prop: dict[str, Any]) -> str | None:
    rollup = prop.get("rollup")
    if not isinstance(rollup, dict) or rollup.get("type") != "array":
        return None
    for item in rollup.get("array") or []:
        if isinstance(item, dict) and item.get("type") == "title":
            text = _first_plain_text(item.get("title"))
            if text is not None:
                return text
    return None


def _rollup_date(prop: dict[str, Any]) -> str | None:
    rollup = prop.get("rollup")
    if not isinstance(rollup, dict):
        return None

    kind = rollup.get("type")
    if kind == "date":
        return _date_start(rollup.get("date"))

    if kind != "array":
        return None

    # First date in the array, either a plain date or a date-typed formula.
    for item in rollup.get("array") or []:
        if not isinstance(item, dict):
            continue
        if item.get("type") == "date":
            found = _date_start(item.get("date"))
        elif item.get("type") == "formula":
            formula = item.get("formula") or {}
            found = _date_start(formula.get("date")) if formula.get("type") == "date" else None
        else:
            found = None
        if found:
            return found
    return None


def page_to_task(page: dict[str, Any]) -> Task:
    """Map one Notion page object from a database query to a Task."""
    props: dict[str, Any] = page.get("properties") or {}

    title_prop = props.get(PROP_TITLE) or {}
    if title_prop.get("type") == "title":
        title = _first_plain_text(title_prop.get("title")) or ""
    else:
        title = "Untitled"

    checkbox_prop = props.get(PROP_CHECKBOX) or {}
    checked = checkbox_prop.get("checkbox") if checkbox_prop.get("type") == "checkbox" else False

    date_prop = props.get(PROP_DATE) or {}
    do_date = _date_start(date_prop.get("date")) if date_prop.get("type") == "date" else None

    obj_name_prop = props.get(PROP_OBJECTIVE_NAME) or {}
    objective_name = _rollup_array_title(obj_name_prop) if obj_name_prop.get("type") == "rollup" else None

    obj_deadline_prop = props.get(PROP_OBJECTIVE_DEADLINE) or {}
    objective_deadline = (
        _rollup_date(obj_deadline_prop) if obj_deadline_prop.get("type") == "rollup" else None
    )

    return Task(
        id=str(page.get("id", "")),
        title=title,
        status=TaskStatus.from_checkbox(bool(checked)),
        do_date=do_date,
        objective_name=objective_name,
        objective_deadline=objective_deadline,
    )


def database_to_source(obj: dict[str, Any]) -> DataSource:
    title = _first_plain_text(obj.get("title")) or "Untitled Database"
    return DataSource(id=str(obj.get("id", "")), title=title)


def open_tasks_query(today: date) -> dict[str, Any]:
    """Open (unchecked) tasks whose date is today or earlier."""
    return {
        "filter": {
            "and": [
                {"property": PROP_CHECKBOX, "checkbox": {"equals": False}},
                {"property": PROP_DATE, "date": {"on_or_before": today.isoformat()}},
            ]
        }
    }


class NotionClient:
    """Async Notion API client implementing the TaskBridge port."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        notion_version: str = DEFAULT_NOTION_VERSION,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._notion_version = notion_version
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(10.0, timeout_seconds))
        self._transport = transport

    @classmethod
    def from_settings(cls, settings) -> NotionClient:
        return cls(
            base_url=settings.notion_base_url,
            notion_version=settings.notion_version,
            timeout_seconds=settings.http_timeout_seconds,
        )

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Notion-Version": self._notion_version,
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, token: str, body: dict[str, Any]) -> str:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                res = await client.request(method, url, headers=self._headers(token), json=body)
        except httpx.HTTPError as e:
            logger.info("Notion %s %s failed: %s", method, path, e.__class__.__name__)
            raise NotionError(str(e) or e.__class__.__name__) from e

        if res.is_error:
            logger.info("Notion %s %s -> HTTP %s", method, path, res.status_code)
            raise NotionAPIError(res.status_code, f"Notion API Error: {res.text}")

        return res.text

    @staticmethod
    def _decode(body_text: str) -> dict[str, Any]:
        try:
            data = json.loads(body_text)
        except ValueError as e:
            snippet = body_text[:_SNIPPET_CHARS]
            raise NotionError(f"JSON Parse Error: {e}. Snippet: {snippet}") from e
        if not isinstance(data, dict):
            raise NotionError(f"JSON Parse Error: expected an object. Snippet: {body_text[:_SNIPPET_CHARS]}")
        return data

    async def fetch_tasks(self, token: str, database_id: str) -> list[Task]:
        body = open_tasks_query(date.today())
        text = await self._request("POST", f"/v1/databases/{database_id}/query", token, body)
        data = self._decode(text)

        pages = data.get("results") or []
        tasks = [page_to_task(p) for p in pages if isinstance(p, dict)]
        logger.info("Fetched %d tasks from database %s", len(tasks), database_id)
        return tasks

    async def mark_task_complete(self, token: str, page_id: str, completed: bool) -> None:
        body = {"properties": {PROP_CHECKBOX: {"checkbox": completed}}}
        await self._request("PATCH", f"/v1/pages/{page_id}", token, body)
        logger.info("Task %s -> completed=%s", page_id, completed)

    async def fetch_databases(self, token: str) -> list[DataSource]:
        body = {"filter": {"value": "database", "property": "object"}, "page_size": 100}
        text = await self._request("POST", "/v1/search", token, body)
        data = self._decode(text)
        return [database_to_source(obj) for obj in data.get("results") or [] if isinstance(obj, dict)]
