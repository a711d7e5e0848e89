from wordlobby import db, store
from wordlobby.models import Document


def test_get_set_and_versioning(app_ctx):
    assert store.get_document('things/a') is None
    store.set_document('things/a', {'n': 1})
    store.set_document('things/a', {'n': 2})
    assert store.get_document('things/a') == {'n': 2}
    doc = db.session.get(Document, 'things/a')
    assert doc.to_dict() == {'path': 'things/a', 'value': {'n': 2}, 'version': 2}


def test_push_generates_distinct_keys(app_ctx):
    first = store.push_document('things', {'n': 1})
    second = store.push_document('things', {'n': 2})
    assert first != second
    assert store.get_document(f'things/{first}') == {'n': 1}
    assert store.get_document(f'things/{second}') == {'n': 2}


def test_transaction_creates_missing_document(app_ctx):
    result = store.run_transaction('counter', lambda value: (value or 0) + 1)
    assert result.committed
    assert result.value == 1
    assert store.get_document('counter') == 1


def test_transaction_abort_leaves_document(app_ctx):
    store.set_document('counter', 5)
    result = store.run_transaction('counter', lambda value: store.ABORT)
    assert not result.committed
    assert result.value == 5
    assert store.get_document('counter') == 5


def test_transaction_null_on_missing_commits_without_writing(app_ctx):
    result = store.run_transaction('nothing/here', lambda value: None)
    assert result.committed
    assert not result.exists
    assert store.get_document('nothing/here') is None


def test_transaction_returning_null_deletes(app_ctx):
    store.set_document('doomed', {'x': 1})
    result = store.run_transaction('doomed', lambda value: None)
    assert result.committed
    assert store.get_document('doomed') is None


def test_transaction_body_gets_a_copy(app_ctx):
    store.set_document('doc', {'items': [1]})

    def body(value):
        value['items'].append(2)
        return store.ABORT

    store.run_transaction('doc', body)
    assert store.get_document('doc') == {'items': [1]}


def test_transaction_retries_after_concurrent_write(app_ctx):
    store.set_document('counter', 10)
    seen = []

    def body(value):
        seen.append(value)
        if len(seen) == 1:
            # Another writer commits between our read and our write
            store.set_document('counter', 100)
        return value + 1

    result = store.run_transaction('counter', body)
    assert result.committed
    assert seen == [10, 100]
    assert store.get_document('counter') == 101


def test_transaction_retries_after_concurrent_create(app_ctx):
    calls = []

    def body(value):
        calls.append(value)
        if len(calls) == 1:
            store.set_document('fresh', {'by': 'other'})
        return {'by': 'us', 'saw': value}

    result = store.run_transaction('fresh', body)
    assert result.committed
    assert calls == [None, {'by': 'other'}]
    assert store.get_document('fresh') == {'by': 'us', 'saw': {'by': 'other'}}


def test_transaction_gives_up_after_max_retries(app_ctx):
    app_ctx.config['STORE_TRANSACTION_MAX_RETRIES'] = 3
    store.set_document('busy', 0)
    calls = []

    def body(value):
        calls.append(value)
        store.set_document('busy', value + 1000)
        return value + 1

    result = store.run_transaction('busy', body)
    assert not result.committed
    assert len(calls) == 3
    assert store.get_document('busy') == calls[-1] + 1000


def test_set_recovers_when_document_appears_after_update(app_ctx, monkeypatch):
    store.set_document('shared', {'by': 'other'})
    real_overwrite = store._overwrite
    calls = []

    def missed_then_real(path, value):
        calls.append(path)
        if len(calls) == 1:
            # The row was created by another writer after this update ran
            return False
        return real_overwrite(path, value)

    monkeypatch.setattr(store, '_overwrite', missed_then_real)
    store.set_document('shared', {'by': 'us'})

    assert len(calls) == 2
    assert store.get_document('shared') == {'by': 'us'}
    assert db.session.get(Document, 'shared').version == 2
