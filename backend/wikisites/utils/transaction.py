from contextlib import contextmanager

from wikisites.extensions import db


@contextmanager
def transactional():
    """
    Commit the block's changes as one unit.

    Any exception rolls the session back and propagates; the session is
    yielded for callers that need to flush for generated ids.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
