import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional

from mailtriage.errors import NetworkFailure
from mailtriage.lib.shared.models.email import EmailRecord
from mailtriage.services.email import classification, view
from mailtriage.services.email.classification import Bucket
from mailtriage.dashboard.preferences import PreferenceStore

logger = logging.getLogger(__name__)

MOBILE_BREAKPOINT = 768
MIN_SPLIT = 30
MAX_SPLIT = 70
DEFAULT_SPLIT = 50

def clamp_split(position: float) -> float:
    return min(MAX_SPLIT, max(MIN_SPLIT, position))

def is_mobile_width(width: int) -> bool:
    return width < MOBILE_BREAKPOINT


@dataclass
class DashboardViewState:
    selected_id: Optional[str] = None
    active_bucket: Bucket = Bucket.IMPORTANT
    search_text: str = ""
    split_ratio: float = DEFAULT_SPLIT
    is_mobile_layout: bool = False
    is_dark_theme: bool = False
    is_resizing: bool = False
    is_loading: bool = True
    error_message: str = ""


class SplitDrag:
    """Handle for one press-move-release drag of the pane divider."""

    def __init__(self, controller: "DashboardController"):
        self._controller = controller

    def move(self, pixel_x: float) -> float:
        return self._controller.resize_split(pixel_x)


class DashboardController:
    """
    Owns the dashboard's view state and its copy of the email list.

    Every mutation is optimistic: local state changes first, then the API call is
    made, and its outcome never changes state again apart from the error banner.
    There is no rollback.
    """

    def __init__(self, client, preferences: Optional[PreferenceStore] = None, viewport_width: int = 1280):
        self.client = client
        self.preferences = preferences
        self.emails: List[EmailRecord] = []
        self.state = DashboardViewState(
            is_mobile_layout=is_mobile_width(viewport_width),
            is_dark_theme=preferences.is_dark_theme() if preferences else False,
        )
        self._container: Optional[tuple] = None

    # --- Loading ---
    def load(self) -> None:
        """Fetches the full list. Replaces local edits, including optimistic ones still in flight."""
        self.state.is_loading = True
        try:
            self.emails = self.client.fetch_emails()
        except NetworkFailure as e:
            logger.error(f"Error fetching emails: {e}")
            self.state.error_message = "Network error" if e.status_code is None else "Failed to fetch emails"
        finally:
            self.state.is_loading = False

    refresh = load

    # --- Read-only projections ---
    @property
    def visible_emails(self) -> List[EmailRecord]:
        return view.filter_view(self.emails, self.state.active_bucket, self.state.search_text)

    @property
    def counts(self) -> Dict[Bucket, int]:
        return view.bucket_counts(self.emails)

    @property
    def view_title(self) -> str:
        return view.view_title(self.state.active_bucket)

    @property
    def selected_email(self) -> Optional[EmailRecord]:
        return self._find(self.state.selected_id)

    @property
    def show_reading_pane(self) -> bool:
        return self.selected_email is not None and not self.state.is_mobile_layout

    @property
    def list_width(self) -> float:
        """Width of the list pane in percent."""
        if self.show_reading_pane:
            return self.state.split_ratio
        return 100

    # --- Transitions ---
    def select(self, email_id: str) -> None:
        record = self._find(email_id)
        if record is None:
            return
        self.state.selected_id = email_id
        if not record.is_read:
            self._replace(replace(record, is_read=True))
            try:
                self.client.mark_read(email_id)
            except NetworkFailure as e:
                # best effort, never surfaced
                logger.warning(f"Failed to mark {email_id} as read: {e}")

    def clear_selection(self) -> None:
        self.state.selected_id = None

    def switch_bucket(self, bucket: Bucket) -> None:
        # Selection is kept even if the record is not in the new bucket
        self.state.active_bucket = Bucket(bucket)

    def toggle_importance(self, email_id: str) -> None:
        record = self._find(email_id)
        if record is None:
            return
        patch = classification.toggle_importance(record)
        updated = classification.apply_importance(record, patch)
        self._replace(updated)

        if self.state.selected_id == email_id and not classification.in_bucket(updated, self.state.active_bucket):
            self.state.selected_id = None

        try:
            self.client.update_importance(email_id, patch)
        except NetworkFailure as e:
            logger.error(f"Error updating importance of {email_id}: {e}")
            self.state.error_message = "Failed to update email importance"

    def delete_email(self, email_id: str) -> None:
        self.emails = [e for e in self.emails if e.id != email_id]
        if self.state.selected_id == email_id:
            self.state.selected_id = None

        try:
            self.client.delete_email(email_id)
        except NetworkFailure as e:
            logger.error(f"Error deleting {email_id}: {e}")
            self.state.error_message = "Failed to delete email"

    def search(self, text: str) -> None:
        self.state.search_text = text or ""

    def clear_search(self) -> None:
        self.state.search_text = ""

    @contextmanager
    def drag(self, container_left: float, container_width: float) -> Iterator[SplitDrag]:
        """
        Scope of one divider drag. Moves only take effect inside the `with` block;
        the drag is released on exit, including when the block raises.
        """
        self.state.is_resizing = True
        self._container = (container_left, container_width)
        try:
            yield SplitDrag(self)
        finally:
            self.state.is_resizing = False
            self._container = None

    def resize_split(self, pixel_x: float) -> float:
        if not self.state.is_resizing or self._container is None:
            return self.state.split_ratio
        if self.state.selected_id is None or self.state.is_mobile_layout:
            return self.state.split_ratio

        left, width = self._container
        if width <= 0:
            return self.state.split_ratio
        self.state.split_ratio = clamp_split((pixel_x - left) / width * 100)
        return self.state.split_ratio

    def set_viewport(self, width: int) -> None:
        self.state.is_mobile_layout = is_mobile_width(width)
        self.state.split_ratio = clamp_split(self.state.split_ratio)

    def toggle_theme(self) -> None:
        self.state.is_dark_theme = not self.state.is_dark_theme
        if self.preferences is None:
            return
        try:
            self.preferences.save_theme(self.state.is_dark_theme)
        except OSError as e:
            logger.warning(f"Could not save theme preference: {e}")

    def dismiss_error(self) -> None:
        self.state.error_message = ""

    # --- Helpers ---
    def _find(self, email_id: Optional[str]) -> Optional[EmailRecord]:
        if email_id is None:
            return None
        return next((e for e in self.emails if e.id == email_id), None)

    def _replace(self, record: EmailRecord) -> None:
        self.emails = [record if e.id == record.id else e for e in self.emails]
