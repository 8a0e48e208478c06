from datetime import datetime, timedelta, timezone
import pytest
from sqlalchemy import create_engine
from core.database import create_session_factory
from core.errors import SessionNotFoundError, StoreUnavailableError, CommitError
from models.sessions import UserSession
from models.users import User
from repositories.sessions import SessionRepository
from utils.ids import uuid7


def naive_utc(**delta) -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(**delta)


def count_sessions(session, user_id) -> int:
    return session.query(UserSession).filter(UserSession.user_id == user_id).count()


@pytest.fixture
def repository(context) -> SessionRepository:
    return SessionRepository(context.session_factory)


def test_create_and_commit(repository, session, verified_user):
    """Committed sessions are visible to other connections."""
    with repository.new_client(transactional=True) as store:
        created = store.create(UserSession(id=uuid7(), user_id=verified_user.id))
        store.commit()

    row = session.query(UserSession).filter(UserSession.id == created.id).one()
    assert row.user_id == verified_user.id
    assert row.created_at is not None


def test_rollback_discards_writes(repository, session, verified_user):
    with repository.new_client(transactional=True) as store:
        store.create(UserSession(id=uuid7(), user_id=verified_user.id))
        store.rollback()

    assert count_sessions(session, verified_user.id) == 0


def test_close_without_commit_rolls_back(repository, session, verified_user):
    with repository.new_client(transactional=True) as store:
        store.create(UserSession(id=uuid7(), user_id=verified_user.id))

    assert count_sessions(session, verified_user.id) == 0


def test_close_rolls_back_when_block_raises(repository, session, verified_user):
    with pytest.raises(RuntimeError):
        with repository.new_client(transactional=True) as store:
            store.create(UserSession(id=uuid7(), user_id=verified_user.id))
            raise RuntimeError("deadline exceeded")

    assert count_sessions(session, verified_user.id) == 0


def test_non_transactional_writes_commit_immediately(repository, session, verified_user):
    with repository.new_client(transactional=False) as store:
        store.create(UserSession(id=uuid7(), user_id=verified_user.id))
        # commit/rollback are no-ops on a plain handle
        store.rollback()
        store.commit()

    assert count_sessions(session, verified_user.id) == 1


def test_list_by_account_orders_oldest_first(repository, session, verified_user):
    ids = [uuid7() for _ in range(3)]
    session.add_all([
        UserSession(id=ids[0], user_id=verified_user.id, created_at=naive_utc(hours=1)),
        UserSession(id=ids[1], user_id=verified_user.id, created_at=naive_utc(hours=3)),
        UserSession(id=ids[2], user_id=verified_user.id, created_at=naive_utc(hours=2)),
    ])
    session.commit()

    with repository.new_client() as store:
        listed = [s.id for s in store.list_by_account(verified_user.id)]
        assert store.count_by_account(verified_user.id) == 3

    assert listed == [ids[1], ids[2], ids[0]]


def test_list_by_account_is_scoped_to_account(repository, session, verified_user):
    other_user_id = uuid7()
    session.add(User(id=other_user_id, full_name="Other", email="other@example.com", hashed_password="x"))
    session.add(UserSession(id=uuid7(), user_id=other_user_id))
    session.commit()

    with repository.new_client() as store:
        assert store.list_by_account(verified_user.id) == []
        assert len(store.list_by_account(other_user_id)) == 1


def test_delete_oldest_removes_exactly_one(repository, session, verified_user):
    oldest, middle, newest = uuid7(), uuid7(), uuid7()
    session.add_all([
        UserSession(id=middle, user_id=verified_user.id, created_at=naive_utc(hours=2)),
        UserSession(id=oldest, user_id=verified_user.id, created_at=naive_utc(hours=3)),
        UserSession(id=newest, user_id=verified_user.id, created_at=naive_utc(hours=1)),
    ])
    session.commit()

    with repository.new_client(transactional=True) as store:
        store.delete_oldest_by_account(verified_user.id)
        store.commit()

    remaining = {s.id for s in session.query(UserSession).filter(UserSession.user_id == verified_user.id)}
    assert remaining == {middle, newest}


def test_delete_oldest_breaks_timestamp_ties_by_id(repository, session, verified_user):
    """Same created_at: the earlier (smaller) time-ordered id goes first."""
    same_time = naive_utc(hours=1)
    first, second = uuid7(), uuid7()
    session.add_all([
        UserSession(id=second, user_id=verified_user.id, created_at=same_time),
        UserSession(id=first, user_id=verified_user.id, created_at=same_time),
    ])
    session.commit()

    with repository.new_client(transactional=True) as store:
        store.delete_oldest_by_account(verified_user.id)
        store.commit()

    remaining = {s.id for s in session.query(UserSession).filter(UserSession.user_id == verified_user.id)}
    assert remaining == {second}


def test_delete_oldest_without_sessions(repository, verified_user):
    with repository.new_client(transactional=True) as store:
        with pytest.raises(SessionNotFoundError):
            store.delete_oldest_by_account(verified_user.id)


def test_commit_failure_is_wrapped(repository, verified_user, monkeypatch):
    from sqlalchemy.exc import OperationalError

    with repository.new_client(transactional=True) as store:
        store.create(UserSession(id=uuid7(), user_id=verified_user.id))

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(store.db, "commit", failing_commit)

        with pytest.raises(CommitError) as exc_info:
            store.commit()

    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_unreachable_store(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}")
    repository = SessionRepository(create_session_factory(engine))

    with pytest.raises(StoreUnavailableError):
        repository.new_client(transactional=True)

    engine.dispose()
