"""
The state shared by one rendered feed.
"""

from typing import List, Optional

from bs4 import Tag

from .builder import build_placeholder, create_select_options
from .dom import DEFAULT_TEXT, Document, is_disabled, set_disabled
from .listeners import ListenerManager
from .models import User
from .toggles import ToggleRegistry


class FeedSession:
    """
    Owns the page, its root container, the selection control, the toggle
    registry and the listener manager. Only the orchestrator and the
    refresher mutate it.
    """

    def __init__(self, document: Optional[Document] = None):
        self.document = document or Document()
        self.registry = ToggleRegistry()
        self.listeners = ListenerManager(self.document, self.registry)
        self.selected_user_id: Optional[int] = None
        self.busy = False

        if not self.container.find(True):
            self.container.append(build_placeholder(self.document, DEFAULT_TEXT))

    @property
    def container(self) -> Tag:
        return self.document.main

    @property
    def select_menu(self) -> Tag:
        return self.document.select_menu

    @property
    def selection_enabled(self) -> bool:
        return not is_disabled(self.select_menu)

    def set_selection_enabled(self, enabled: bool) -> None:
        set_disabled(self.select_menu, not enabled)

    def populate_select_menu(self, users: List[User]) -> int:
        options = create_select_options(self.document, users)
        for option in options:
            self.select_menu.append(option)
        return len(options)
