from post_feed.builder import (
    COMMENTS_UNAVAILABLE,
    SHOW_COMMENTS,
    UNKNOWN_AUTHOR,
    build_comment_subtree,
    build_post_subtree,
    create_select_options,
)
from post_feed.dom import Document, has_class
from post_feed.models import Comment, Post, User


POST = Post(id=5, user_id=7, title="Hello", body="World")
AUTHOR = User(id=7, name="Ada", company_name="Analytical", company_catch_phrase="Engines all the way")


def texts(node):
    return [child.get_text() for child in node.find_all(recursive=False)]


def test_comment_subtree_blocks():
    doc = Document()
    fragment = build_comment_subtree(doc, [Comment(id=1, post_id=5, name="Bob", email="bob@x.io", body="Nice")])
    assert len(fragment) == 1
    assert fragment[0].name == "article"
    assert texts(fragment[0]) == ["Bob", "Nice", "From: bob@x.io"]


def test_empty_comments_give_empty_fragment():
    assert build_comment_subtree(Document(), []) == []


def test_post_subtree_layout():
    doc = Document()
    subtree = build_post_subtree(doc, POST, AUTHOR, build_comment_subtree(doc, []))

    assert subtree.post_id == 5
    assert texts(subtree.node)[:5] == [
        "Hello",
        "World",
        "Post ID: 5",
        "Author: Ada with Analytical",
        "Engines all the way",
    ]
    assert subtree.trigger.name == "button"
    assert subtree.trigger.get_text() == SHOW_COMMENTS
    assert subtree.trigger["data-post-id"] == "5"
    assert subtree.section["data-post-id"] == "5"
    assert has_class(subtree.section, "comments")
    assert has_class(subtree.section, "hide")
    assert subtree.node.parent is None


def test_missing_author_uses_placeholder():
    doc = Document()
    subtree = build_post_subtree(doc, POST, None, [])
    assert f"Author: {UNKNOWN_AUTHOR}" in texts(subtree.node)


def test_missing_comments_use_placeholder():
    doc = Document()
    subtree = build_post_subtree(doc, POST, AUTHOR, None)
    assert subtree.section.get_text() == COMMENTS_UNAVAILABLE


def test_select_options():
    options = create_select_options(Document(), [AUTHOR])
    assert options[0]["value"] == "7"
    assert options[0].get_text() == "Ada"
