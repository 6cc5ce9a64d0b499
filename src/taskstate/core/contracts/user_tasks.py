"""Wire shapes of the JSON user-task document.

The field aliases are the public keys; Python-side names stay snake_case.
Serialise with ``model_dump_json(by_alias=True)`` to get the compact form::

    {"userTasks":[{"UserTaskId":"...","RequestURL":"...","ClientIdentity":"...",
                   "StartMs":"...","Status":"Active"}],"version":1}
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserTaskEntry(BaseModel):
    """One row of the ``userTasks`` list."""

    model_config = ConfigDict(populate_by_name=True)

    user_task_id: str = Field(alias="UserTaskId")
    request_url: str = Field(alias="RequestURL")
    client_identity: str = Field(alias="ClientIdentity")
    # Decimal string, not a number.
    start_ms: str = Field(alias="StartMs")
    status: str = Field(alias="Status")


class UserTasksPayload(BaseModel):
    """Top-level JSON document."""

    model_config = ConfigDict(populate_by_name=True)

    user_tasks: list[UserTaskEntry] = Field(default_factory=list, alias="userTasks")
    version: int = Field(ge=0)


__all__ = ["UserTaskEntry", "UserTasksPayload"]
