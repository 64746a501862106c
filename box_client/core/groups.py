"""Box group management operations."""
from __future__ import annotations
import logging
from typing import List, Optional

from .resource import ResourceService, unwrap

logger = logging.getLogger(__name__)


class GroupService(ResourceService):
    """Service for managing Box groups and group memberships."""

    collection = "groups"

    def list_groups(self, limit: int = 100, offset: int = 0) -> List[dict]:
        result = self._request("GET", query={"limit": limit, "offset": offset})
        return result.get("entries") or []

    def get_group_id(self, name: str) -> Optional[str]:
        """Return the ID of the group named exactly ``name``, or None.

        Only the first page of groups is searched.
        """
        group_id = None
        for group in self.list_groups(limit=1000):
            if group.get("name") == name:
                group_id = group.get("id")
        return group_id

    def create_group(self, name: str) -> dict:
        group = self._request("POST", body={"name": name})
        logger.info("Created Box group '%s' (id=%s)", name, group.get("id"))
        return group

    def add_user(self, user_id: str, group_id: str, role: Optional[str] = None) -> dict:
        """Add a user to a group.

        Args:
            user_id: User ID
            group_id: Group ID
            role: Membership role ("member" or "admin"); Box default when None

        Returns:
            Group membership object
        """
        body = {"user": {"id": user_id}, "group": {"id": group_id}}
        if role:
            body["role"] = role
        result = self.client.request(
            "POST",
            self.client.api_url("group_memberships"),
            self._params(body=body),
        )
        return unwrap(result)

    def get_memberships(self, group_id: str, limit: int = 100, offset: int = 0) -> List[dict]:
        result = self._request("GET", f"{group_id}/memberships", query={"limit": limit, "offset": offset})
        return result.get("entries") or []
