'''Duplicate suppression for posts across repeated polls.'''

from collections.abc import Callable, Iterable, Sequence

from feedwatch.models import Post, PostFields


def merge_new_posts(
    candidates: Sequence[PostFields],
    feed_id: str,
    known_posts: Iterable[Post],
    next_id: Callable[[], str],
) -> list[Post]:
    '''
    Return the candidates that are new for feed_id, as Posts with fresh ids.

    A candidate is a duplicate when a known post has the same feed_id and
    title. Candidate order is kept; candidates are only checked against
    known_posts, not against each other.
    '''
    seen = {p.title for p in known_posts if p.feed_id == feed_id}
    return [
        Post(id=next_id(), feed_id=feed_id, title=c.title, link=c.link, description=c.description)
        for c in candidates
        if c.title not in seen
    ]
