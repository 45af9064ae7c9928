import copy
import json
import logging
import os
from typing import Any, Dict, List, Optional

from mailtriage.errors import EmailNotFoundError
from mailtriage.lib.shared.models.email import EmailRecord
from mailtriage.services.email.store import EmailStore

logger = logging.getLogger(__name__)

class MockEmailStore(EmailStore):
    """
    In-memory email store, seeded from a JSON file of raw documents.
    Used in demo mode and by the test suite. Changes are never written back to disk.
    """

    def __init__(self, data_path: Optional[str] = "mailtriage/data/mock_store.json", documents: Optional[List[Dict[str, Any]]] = None):
        self.data_path = data_path
        self._documents: Dict[str, Dict[str, Any]] = {}
        seed = documents if documents is not None else self._load_data()
        self.add_emails(seed)

    def _load_data(self) -> List[Dict[str, Any]]:
        """Loads the JSON seed documents from disk."""
        if not self.data_path:
            return []
        try:
            # Adjust path relative to where execution happens (usually root)
            abs_path = os.path.abspath(self.data_path)
            if not os.path.exists(abs_path):
                logger.warning(f"⚠️ Mock Data not found at {abs_path}")
                return []

            with open(abs_path, 'r') as f:
                return json.load(f).get("emails", [])
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error loading mock data: {e}")
            return []

    def list_emails(self) -> List[EmailRecord]:
        return [EmailRecord.from_document(email_id, doc) for email_id, doc in self._documents.items()]

    def add_emails(self, documents: List[Dict[str, Any]]) -> List[str]:
        ids = []
        for doc in documents:
            doc = copy.deepcopy(doc)
            email_id = str(doc.pop("id", None) or doc.pop("_id", None) or self.new_id())
            self._documents[email_id] = doc
            ids.append(email_id)
        return ids

    def update_email(self, email_id: str, fields: Dict[str, Any]) -> None:
        self.check_fields(fields)
        if email_id not in self._documents:
            raise EmailNotFoundError(email_id)
        self._documents[email_id].update({k: v for k, v in fields.items() if v is not None})

    def delete_email(self, email_id: str) -> None:
        if self._documents.pop(email_id, None) is None:
            raise EmailNotFoundError(email_id)
