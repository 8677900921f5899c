"""
Builds page nodes from decoded records.

These functions only create detached nodes; they never touch the live
container.
"""

from typing import List, Optional, Sequence

from bs4 import Tag

from .dom import DATA_POST_ID, HIDE_CLASS, Document, add_class
from .models import Comment, Post, PostSubtree, User


SHOW_COMMENTS = "Show Comments"
HIDE_COMMENTS = "Hide Comments"
UNKNOWN_AUTHOR = "Unknown author"
COMMENTS_UNAVAILABLE = "Comments are unavailable."

# A fragment is an ordered list of detached sibling nodes
Fragment = List[Tag]


def create_elem_with_text(doc: Document, elem_name: str = "p", text_content: str = "", class_name: str = "") -> Tag:
    element = doc.create_element(elem_name)
    element.string = text_content
    if class_name:
        add_class(element, class_name)
    return element


def create_select_options(doc: Document, users: Sequence[User]) -> Fragment:
    options: Fragment = []
    for user in users:
        option = doc.create_element("option", value=str(user.id))
        option.string = user.name
        options.append(option)
    return options


def build_comment_subtree(doc: Document, comments: Sequence[Comment]) -> Fragment:
    """One <article> per comment: author, body, contact line."""
    fragment: Fragment = []
    for comment in comments:
        article = doc.create_element("article")
        article.append(create_elem_with_text(doc, "h3", comment.name))
        article.append(create_elem_with_text(doc, "p", comment.body))
        article.append(create_elem_with_text(doc, "p", f"From: {comment.email}"))
        fragment.append(article)
    return fragment


def build_comment_section(doc: Document, post_id: int, comments_fragment: Optional[Fragment]) -> Tag:
    """
    Collapsed comment section tagged with the post id.

    `comments_fragment` is None when the comments could not be fetched;
    the section then carries a placeholder instead.
    """
    section = doc.create_element("section", **{DATA_POST_ID: str(post_id)})
    add_class(section, "comments")
    add_class(section, HIDE_CLASS)
    if comments_fragment is None:
        section.append(create_elem_with_text(doc, "p", COMMENTS_UNAVAILABLE, "placeholder"))
    else:
        for node in comments_fragment:
            section.append(node)
    return section


def build_post_subtree(doc: Document, post: Post, author: Optional[User], comments_fragment: Optional[Fragment]) -> PostSubtree:
    """
    Assembles a post <article>.

    A missing author (failed lookup) renders a placeholder label; the build
    itself never fails.
    """
    article = doc.create_element("article", **{DATA_POST_ID: str(post.id)})
    add_class(article, "post")

    article.append(create_elem_with_text(doc, "h2", post.title))
    article.append(create_elem_with_text(doc, "p", post.body))
    article.append(create_elem_with_text(doc, "p", f"Post ID: {post.id}"))

    if author is not None:
        article.append(create_elem_with_text(doc, "p", f"Author: {author.name} with {author.company_name}"))
        article.append(create_elem_with_text(doc, "p", author.company_catch_phrase))
    else:
        article.append(create_elem_with_text(doc, "p", f"Author: {UNKNOWN_AUTHOR}", "placeholder"))
        article.append(create_elem_with_text(doc, "p", "", "placeholder"))

    button = create_elem_with_text(doc, "button", SHOW_COMMENTS)
    button[DATA_POST_ID] = str(post.id)
    article.append(button)

    section = build_comment_section(doc, post.id, comments_fragment)
    article.append(section)

    return PostSubtree(post_id=post.id, node=article, trigger=button, section=section)


def build_placeholder(doc: Document, text: str) -> Tag:
    """The "no content" node shown when there is nothing to render."""
    return create_elem_with_text(doc, "p", text, "default-text")
