from contextlib import contextmanager

from roomchoice import db


@contextmanager
def atomic():
    """Run the enclosed statements as one unit of work.

    Commits when the block exits normally; any exception rolls the whole
    session back and is re-raised to the caller.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
