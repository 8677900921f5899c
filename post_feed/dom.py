"""
In-memory host page built on BeautifulSoup.

The parsed HTML tree stands in for the browser DOM. BeautifulSoup has no
event model, so Document keeps its own table of click listeners keyed by
node identity.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag


DATA_POST_ID = "data-post-id"
HIDE_CLASS = "hide"
DEFAULT_TEXT = "Select an Employee to display their posts."

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Post Feed</title></head>
<body>
<header>
<label for="selectMenu">Employee</label>
<select id="selectMenu"><option value="">Employees</option></select>
</header>
<main></main>
</body>
</html>
"""


@dataclass(frozen=True)
class Event:
    type: str
    target: Tag


Handler = Callable[[Event], Any]


def get_classes(tag: Tag) -> List[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def has_class(tag: Tag, name: str) -> bool:
    return name in get_classes(tag)


def add_class(tag: Tag, name: str) -> None:
    classes = get_classes(tag)
    if name not in classes:
        classes.append(name)
    tag["class"] = classes


def remove_class(tag: Tag, name: str) -> None:
    classes = [c for c in get_classes(tag) if c != name]
    if classes:
        tag["class"] = classes
    elif tag.has_attr("class"):
        del tag["class"]


def set_text(tag: Tag, text: str) -> None:
    tag.string = text


def set_disabled(tag: Tag, disabled: bool) -> None:
    if disabled:
        tag["disabled"] = "disabled"
    elif tag.has_attr("disabled"):
        del tag["disabled"]


def is_disabled(tag: Tag) -> bool:
    return tag.has_attr("disabled")


def is_attached(node: Tag, root: Tag) -> bool:
    """True when `node` is `root` or one of its descendants."""
    parent: Optional[Tag] = node
    while parent is not None:
        if parent is root:
            return True
        parent = parent.parent
    return False


class Document:
    """A single host page: the parsed tree plus its event listeners."""

    def __init__(self, html: str = PAGE_TEMPLATE):
        self.soup = BeautifulSoup(html, "html.parser")
        # id(node) -> (node, [(event_type, handler), ...])
        self._listeners: Dict[int, Tuple[Tag, List[Tuple[str, Handler]]]] = {}

    @property
    def main(self) -> Tag:
        main = self.soup.find("main")
        if main is None:
            raise LookupError("page has no <main> container")
        return main

    @property
    def select_menu(self) -> Tag:
        select = self.soup.find("select", id="selectMenu")
        if select is None:
            raise LookupError("page has no #selectMenu control")
        return select

    def create_element(self, name: str, **attrs: str) -> Tag:
        return self.soup.new_tag(name, attrs=attrs)

    # --- Events ---

    def add_listener(self, node: Tag, event_type: str, handler: Handler) -> None:
        entry = self._listeners.get(id(node))
        if entry is None or entry[0] is not node:
            # A collected node's id can be reused; its bindings are dead
            entry = (node, [])
            self._listeners[id(node)] = entry
        entry[1].append((event_type, handler))

    def remove_listener(self, node: Tag, event_type: str, handler: Handler) -> bool:
        entry = self._listeners.get(id(node))
        if entry is None or entry[0] is not node:
            return False
        bindings = entry[1]
        for i, (bound_type, bound_handler) in enumerate(bindings):
            if bound_type == event_type and bound_handler == handler:
                del bindings[i]
                if not bindings:
                    del self._listeners[id(node)]
                return True
        return False

    def listeners(self, node: Tag, event_type: str) -> List[Handler]:
        entry = self._listeners.get(id(node))
        if entry is None or entry[0] is not node:
            return []
        return [h for t, h in entry[1] if t == event_type]

    def listener_count(self) -> int:
        return sum(len(bindings) for _, bindings in self._listeners.values())

    def dispatch(self, node: Tag, event_type: str) -> List[Any]:
        """Calls every handler bound to `node` for `event_type`, in bind order."""
        event = Event(type=event_type, target=node)
        return [handler(event) for handler in self.listeners(node, event_type)]

    def click(self, node: Tag) -> List[Any]:
        return self.dispatch(node, "click")

    def render(self) -> str:
        return str(self.soup)
