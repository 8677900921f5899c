from post_feed.builder import build_post_subtree
from post_feed.dom import Document
from post_feed.listeners import ListenerManager
from post_feed.models import NotFound, Post
from post_feed.toggles import ToggleRegistry


def _page(post_ids):
    doc = Document()
    registry = ToggleRegistry()
    subtrees = []
    for pid in post_ids:
        subtree = build_post_subtree(doc, Post(id=pid, user_id=1, title="t", body="b"), None, [])
        doc.main.append(subtree.node)
        registry.register(pid, subtree.section, subtree.trigger)
        subtrees.append(subtree)
    return doc, registry, subtrees


def test_attach_binds_each_trigger_once():
    doc, registry, subtrees = _page([1, 2, 3])
    manager = ListenerManager(doc, registry)

    assert manager.attach_all(doc.main) == 3
    assert manager.attach_all(doc.main) == 0
    assert doc.listener_count() == 3
    for subtree in subtrees:
        assert len(doc.listeners(subtree.trigger, "click")) == 1


def test_detach_removes_all_bindings():
    doc, registry, _ = _page([1, 2])
    manager = ListenerManager(doc, registry)
    manager.attach_all(doc.main)

    assert manager.detach_all(doc.main) == 2
    assert doc.listener_count() == 0
    assert manager.binding_count == 0


def test_click_reads_post_id_from_node():
    doc, registry, subtrees = _page([1, 2])
    manager = ListenerManager(doc, registry)
    manager.attach_all(doc.main)

    assert doc.click(subtrees[1].trigger) == [True]
    assert registry.is_visible(2) is True
    assert registry.is_visible(1) is False


def test_click_for_unregistered_post_is_ignored():
    doc, registry, subtrees = _page([4])
    manager = ListenerManager(doc, registry)
    manager.attach_all(doc.main)
    registry.clear()

    assert doc.click(subtrees[0].trigger) == [NotFound(4)]


def test_click_with_unparseable_post_id_is_ignored():
    doc, registry, subtrees = _page([4])
    manager = ListenerManager(doc, registry)
    manager.attach_all(doc.main)
    subtrees[0].trigger["data-post-id"] = "¹"

    assert doc.click(subtrees[0].trigger) == [NotFound("¹")]
    assert registry.is_visible(4) is False
