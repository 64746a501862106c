"""Box folder operations."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from .resource import Fields, ResourceService, fields_query

ROOT_FOLDER_ID = "0"


class FolderService(ResourceService):
    """Service for Box folders. Folder "0" is the root of the current user."""

    collection = "folders"

    def get_details(self, folder_id: str = ROOT_FOLDER_ID, fields: Fields = None) -> dict:
        return self._request("GET", folder_id, query=fields_query(fields))

    def get_items(
        self,
        folder_id: str = ROOT_FOLDER_ID,
        item_type: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[dict]:
        """List the items of a folder.

        Args:
            folder_id: Folder ID
            item_type: Only return items of this type ("file", "folder", "web_link")
            params: Query fields (limit, offset, fields, ...)

        Returns:
            List of item objects (empty if the folder has none)
        """
        response = self._request("GET", f"{folder_id}/items", query=params)
        entries = response.get("entries") or []
        if not item_type:
            return entries
        return [entry for entry in entries if entry.get("type") == item_type]

    def get_collaborators(self, folder_id: str = ROOT_FOLDER_ID, fields: Fields = None) -> dict:
        return self._request("GET", f"{folder_id}/collaborations", query=fields_query(fields))

    def create(self, name: str, parent_id: str = ROOT_FOLDER_ID, fields: Fields = None) -> dict:
        body = {"name": name, "parent": {"id": parent_id}}
        return self._request("POST", body=body, query=fields_query(fields))

    def update(self, folder_id: str, values: Dict[str, Any], fields: Fields = None) -> dict:
        return self._request("PUT", folder_id, body=values, query=fields_query(fields))

    def delete(self, folder_id: str, recursive: bool = False) -> bool:
        """Delete a folder; non-empty folders require ``recursive=True``."""
        return self._delete(folder_id, query={"recursive": str(recursive).lower()})
