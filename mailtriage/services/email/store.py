import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import chromadb

from mailtriage.config import DashboardConfig
from mailtriage.errors import EmailNotFoundError, StoreFailure
from mailtriage.lib.shared.models.email import EmailRecord, parse_date

logger = logging.getLogger(__name__)

# Fields the dashboard is allowed to patch on a stored document
PATCHABLE_FIELDS = {"isImportant", "classification", "isRead"}


class EmailStore(ABC):
    """
    Interface of the email document store.

    Records are plain documents keyed by a store-generated id. Reads always go
    through `EmailRecord.from_document`, so missing fields come back defaulted.
    """

    @abstractmethod
    def list_emails(self) -> List[EmailRecord]:
        raise NotImplementedError

    @abstractmethod
    def add_emails(self, documents: List[Dict[str, Any]]) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def update_email(self, email_id: str, fields: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_email(self, email_id: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def check_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(fields) - PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not patchable: {sorted(unknown)}")
        return fields


class ChromaEmailStore(EmailStore):
    """
    Email store on a Chroma collection. The email content is the Chroma
    document; every other field lives in the metadata.
    """

    def __init__(self, config: DashboardConfig, client=None, embedding_function=None):
        self.config = config
        try:
            if client is not None:
                self.chroma_client = client
            elif config.chroma_server_host:
                logger.info(f"🔌 Connecting to ChromaDB Server at {config.chroma_server_host}:{config.chroma_server_port}...")
                self.chroma_client = chromadb.HttpClient(
                    host=config.chroma_server_host,
                    port=config.chroma_server_port
                )
            else:
                self.chroma_client = chromadb.PersistentClient(path=config.chroma_db_path)

            kwargs = {"embedding_function": embedding_function} if embedding_function is not None else {}
            self.collection = self.chroma_client.get_or_create_collection(
                name=config.collection_name,
                **kwargs
            )
        except Exception as e:
            raise StoreFailure(f"Could not open collection '{config.collection_name}'") from e

    def list_emails(self) -> List[EmailRecord]:
        try:
            result = self.collection.get(include=["documents", "metadatas"])
        except Exception as e:
            raise StoreFailure("Failed to read emails") from e

        records = []
        for i, email_id in enumerate(result["ids"]):
            doc = dict(result["metadatas"][i] or {})
            doc["content"] = result["documents"][i]
            records.append(EmailRecord.from_document(email_id, doc))
        return records

    def add_emails(self, documents: List[Dict[str, Any]]) -> List[str]:
        ids, contents, metadatas = [], [], []
        for doc in documents:
            ids.append(str(doc.get("id") or self.new_id()))
            contents.append(doc.get("content") or doc.get("body") or "")
            metadatas.append(self._to_metadata(doc))

        if not ids:
            return []
        try:
            self.collection.add(ids=ids, documents=contents, metadatas=metadatas)
        except Exception as e:
            raise StoreFailure("Failed to add emails") from e
        return ids

    def update_email(self, email_id: str, fields: Dict[str, Any]) -> None:
        self.check_fields(fields)
        current = self._get_metadata(email_id)
        current.update({k: v for k, v in fields.items() if v is not None})
        if not current:
            return
        try:
            self.collection.update(ids=[email_id], metadatas=[current])
        except Exception as e:
            raise StoreFailure(f"Failed to update email {email_id}") from e

    def delete_email(self, email_id: str) -> None:
        self._get_metadata(email_id)
        try:
            self.collection.delete(ids=[email_id])
        except Exception as e:
            raise StoreFailure(f"Failed to delete email {email_id}") from e

    def _get_metadata(self, email_id: str) -> Dict[str, Any]:
        try:
            result = self.collection.get(ids=[email_id], include=["metadatas"])
        except Exception as e:
            raise StoreFailure(f"Failed to read email {email_id}") from e
        if not result["ids"]:
            raise EmailNotFoundError(email_id)
        return dict(result["metadatas"][0] or {})

    @staticmethod
    def _to_metadata(doc: Dict[str, Any]) -> Dict[str, Any]:
        # Chroma metadata only holds scalars and rejects None
        metadata = {}
        for key, value in doc.items():
            if key in ("id", "_id", "content", "body") or value is None:
                continue
            if key in ("date", "timestamp"):
                try:
                    value = parse_date(value).isoformat()
                except (ValueError, OverflowError, OSError):
                    # stored as given; reads fall back to the current time
                    value = str(value)
            if isinstance(value, (str, int, float, bool)):
                metadata[key] = value
        # Chroma also rejects an empty metadata dict
        metadata.setdefault("isRead", False)
        return metadata
