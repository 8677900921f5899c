"""
Replaces the container contents with a freshly built set of posts.
"""

import logging
from typing import Sequence

from .models import PostSubtree, RefreshReport
from .session import FeedSession


class ContainerRefresher:
    def __init__(self, session: FeedSession):
        self.session = session

    def refresh(self, subtrees: Sequence[PostSubtree]) -> RefreshReport:
        """
        Detaches listeners, clears the container, appends `subtrees` in
        order, registers their toggles and attaches listeners again.

        Raises ValueError before touching the page if `subtrees` is empty
        or malformed.
        """
        if not subtrees:
            raise ValueError("refresh called with no subtrees; show a placeholder instead")
        seen = set()
        for subtree in subtrees:
            if subtree.post_id in seen:
                raise ValueError(f"duplicate subtree for post {subtree.post_id}")
            seen.add(subtree.post_id)
            if subtree.node.parent is not None:
                raise ValueError(f"subtree for post {subtree.post_id} is already attached")

        session = self.session
        container = session.container

        # Listeners go first, while the old buttons are still in the tree
        detached = session.listeners.detach_all(container)
        session.registry.clear()
        container.clear()

        for subtree in subtrees:
            container.append(subtree.node)
            session.registry.register(subtree.post_id, subtree.section, subtree.trigger)

        attached = session.listeners.attach_all(container)
        logging.info(f"Refreshed container: detached={detached} appended={len(subtrees)} attached={attached}")
        return RefreshReport(detached=detached, appended=len(subtrees), attached=attached)
