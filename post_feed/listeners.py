"""
Click-handler bookkeeping for the comment trigger buttons.
"""

import logging
from typing import Dict, Union

from bs4 import Tag

from .dom import DATA_POST_ID, Document, Event
from .models import NotFound
from .parser import parse_post_id
from .toggles import ToggleRegistry


TRIGGER_SELECTOR = f"button[{DATA_POST_ID}]"


class ListenerManager:
    """
    Binds one click handler per trigger button found under a root node.

    The same bound method is used for every button; the post id is read
    from the clicked button when the event fires.
    """

    def __init__(self, document: Document, registry: ToggleRegistry):
        self.document = document
        self.registry = registry
        # id(button) -> button, for every button currently bound
        self._bound: Dict[int, Tag] = {}

    @property
    def binding_count(self) -> int:
        return len(self._bound)

    def attach_all(self, root: Tag) -> int:
        created = 0
        for button in root.select(TRIGGER_SELECTOR):
            if self._bound.get(id(button)) is button:
                continue
            self.document.add_listener(button, "click", self.handle_click)
            self._bound[id(button)] = button
            created += 1
        logging.debug(f"Attached {created} trigger listeners")
        return created

    def detach_all(self, root: Tag) -> int:
        removed = 0
        for button in root.select(TRIGGER_SELECTOR):
            if self._bound.get(id(button)) is not button:
                continue
            self.document.remove_listener(button, "click", self.handle_click)
            del self._bound[id(button)]
            removed += 1
        if self._bound:
            # Buttons that left the tree without being detached first
            logging.warning(f"{len(self._bound)} bindings outside the container; detaching them")
            for button in list(self._bound.values()):
                self.document.remove_listener(button, "click", self.handle_click)
                removed += 1
            self._bound.clear()
        logging.debug(f"Detached {removed} trigger listeners")
        return removed

    def handle_click(self, event: Event) -> Union[bool, NotFound]:
        post_id = parse_post_id(event.target.get(DATA_POST_ID))
        if post_id is None:
            logging.warning(f"Click on trigger without a usable post id: {event.target.get(DATA_POST_ID)!r}")
            return NotFound(event.target.get(DATA_POST_ID))
        result = self.registry.toggle(post_id)
        if isinstance(result, NotFound):
            logging.warning(f"Stale reference: no toggle entry for post {post_id}")
        return result
