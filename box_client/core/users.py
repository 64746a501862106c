"""Box user management operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .resource import Fields, ResourceService, fields_query

logger = logging.getLogger(__name__)


class UserService(ResourceService):
    """Service for managing Box enterprise users."""

    collection = "users"

    def list_users(
        self,
        filter_term: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[dict]:
        """List enterprise users.

        Args:
            filter_term: Only return users whose name or login starts with this
            limit: Page size
            offset: Index of the first user to return
            params: Additional query fields (override the above)

        Returns:
            List of user objects (empty if none matched)
        """
        query: Dict[str, Any] = {"limit": limit, "offset": offset}
        if filter_term:
            query["filter_term"] = filter_term
        query.update(params or {})
        result = self._request("GET", query=query)
        return result.get("entries") or []

    def get_user(self, user_id: str, fields: Fields = None) -> dict:
        """Retrieve a user by ID ("me" for the current user)."""
        return self._request("GET", user_id, query=fields_query(fields))

    def get_user_by_login(self, login: str, complete: bool = True) -> Optional[Any]:
        """Return the first user matching ``login``.

        Args:
            login: Login (email) to search for
            complete: Return the full user object; when False only its ID

        Returns:
            User object or ID, or None if no user matched
        """
        users = self.list_users(filter_term=login)
        if not users:
            return None
        user = users[0]
        return user if complete else user.get("id")

    def get_current_user(self) -> dict:
        return self.get_user("me")

    def create_user(
        self,
        login: str,
        name: str,
        values: Optional[Dict[str, Any]] = None,
        fields: Fields = None,
    ) -> dict:
        """Create a managed user.

        Args:
            login: Primary email address
            name: Display name
            values: Additional user attributes (role, language, ...)
            fields: Fields to include in the response

        Returns:
            Created user object
        """
        body = {"login": login, "name": name}
        body.update(values or {})
        user = self._request("POST", body=body, query=fields_query(fields))
        logger.info("Created Box user %s (id=%s)", login, user.get("id"))
        return user

    def update_user(self, user_id: str, values: Dict[str, Any], fields: Fields = None) -> dict:
        return self._request("PUT", user_id, body=values, query=fields_query(fields))

    def delete_user(self, user_id: str, force: bool = False, notify: bool = False) -> bool:
        """Delete a user.

        Args:
            user_id: User ID
            force: Delete even if the user still owns content
            notify: Send the user a notification
        """
        query = {"force": str(force).lower(), "notify": str(notify).lower()}
        return self._delete(user_id, query=query)
