"""Box file operations, including multipart upload."""
from __future__ import annotations
import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .folders import ROOT_FOLDER_ID
from .request import MultipartBody, RequestParams
from .resource import Fields, ResourceService, fields_query, unwrap

logger = logging.getLogger(__name__)


class FileService(ResourceService):
    """Service for Box files."""

    collection = "files"

    def get_file(self, file_id: str, params: Optional[Dict[str, Any]] = None) -> dict:
        return self._request("GET", file_id, query=params)

    def get_comments(self, file_id: str, limit: int = 100, offset: int = 0, fields: Fields = None) -> dict:
        query: Dict[str, Any] = {"limit": limit, "offset": offset}
        query.update(fields_query(fields))
        return self._request("GET", f"{file_id}/comments", query=query)

    def get_tasks(self, file_id: str, fields: Fields = None) -> dict:
        return self._request("GET", f"{file_id}/tasks", query=fields_query(fields))

    def get_embed_link(self, file_id: str) -> dict:
        """Return the file object including its ``expiring_embed_link``."""
        return self.get_file(file_id, fields_query("expiring_embed_link"))

    def upload(
        self,
        path: Union[str, Path],
        name: Optional[str] = None,
        parent_id: str = ROOT_FOLDER_ID,
        content_type: Optional[str] = None,
    ) -> dict:
        """Upload a local file to a folder.

        Args:
            path: Local file path
            name: Name in Box (defaults to the local file name)
            parent_id: Destination folder ID
            content_type: MIME type (guessed from the name when omitted)

        Returns:
            Upload response (``{"total_count": 1, "entries": [file]}``)
        """
        path = Path(path)
        name = name or path.name
        content_type = content_type or mimetypes.guess_type(name)[0] or "application/octet-stream"
        attributes = {"name": name, "parent": {"id": parent_id}}

        with path.open("rb") as fh:
            params = RequestParams(
                body=MultipartBody(
                    fields={"attributes": json.dumps(attributes)},
                    files={"file": (name, fh, content_type)},
                ),
            )
            result = self.client.request("POST", self.client.upload_url(self.collection, "content"), params)

        uploaded = unwrap(result)
        logger.info("Uploaded %s to folder %s", name, parent_id)
        return uploaded

    def update(self, file_id: str, values: Dict[str, Any], fields: Fields = None) -> dict:
        return self._request("PUT", file_id, body=values, query=fields_query(fields))

    def delete(self, file_id: str) -> bool:
        return self._delete(file_id)
