"""
Per-post show/hide state for comment sections.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Union

from bs4 import Tag

from .builder import HIDE_COMMENTS, SHOW_COMMENTS
from .dom import HIDE_CLASS, add_class, has_class, is_attached, remove_class, set_text
from .models import NotFound


@dataclass
class ToggleEntry:
    """Back-references into the page; the container owns the nodes."""
    section: Tag
    trigger: Tag
    visible: bool = False


class ToggleRegistry:
    """Maps a post id to its comment section and trigger button."""

    def __init__(self) -> None:
        self._entries: Dict[int, ToggleEntry] = {}

    def register(self, post_id: int, section: Tag, trigger: Tag) -> ToggleEntry:
        entry = ToggleEntry(section=section, trigger=trigger, visible=not has_class(section, HIDE_CLASS))
        if post_id in self._entries:
            logging.warning(f"Post {post_id} registered twice; replacing previous entry")
        self._entries[post_id] = entry
        return entry

    def toggle(self, post_id: int) -> Union[bool, NotFound]:
        """Flips visibility for `post_id` and returns the new state."""
        entry = self._entries.get(post_id)
        if entry is None:
            return NotFound(post_id)

        entry.visible = not entry.visible
        if entry.visible:
            remove_class(entry.section, HIDE_CLASS)
            set_text(entry.trigger, HIDE_COMMENTS)
        else:
            add_class(entry.section, HIDE_CLASS)
            set_text(entry.trigger, SHOW_COMMENTS)
        logging.debug(f"Post {post_id}: comments {'shown' if entry.visible else 'hidden'}")
        return entry.visible

    def is_visible(self, post_id: int) -> Optional[bool]:
        entry = self._entries.get(post_id)
        return entry.visible if entry else None

    def get(self, post_id: int) -> Optional[ToggleEntry]:
        return self._entries.get(post_id)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def purge_detached(self, container: Tag) -> int:
        """Drops entries whose section is no longer inside `container`."""
        stale = [pid for pid, entry in self._entries.items() if not is_attached(entry.section, container)]
        for pid in stale:
            del self._entries[pid]
        if stale:
            logging.info(f"Purged {len(stale)} detached toggle entries")
        return len(stale)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)
