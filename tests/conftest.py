from types import SimpleNamespace

import pytest

from accounts.identity import SESSION_KEY
from launchpad import backend
from tests.factories import ACCESS_TOKEN, USER_ID


class FakeAPIError(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(message)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail:
            raise FakeAPIError("storage unavailable")
        self.storage.objects[(self.name, path)] = file
        self.storage.uploads.append({"bucket": self.name, "path": path, "options": dict(file_options or {})})
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://project.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.uploads = []
        self.fail = False

    def from_(self, name):
        return FakeBucket(self, name)


class FakeQuery:
    def __init__(self, table, write):
        self.table = table
        self.write = write

    def execute(self):
        if self.table.error:
            raise FakeAPIError(self.table.error)
        self.write()
        return SimpleNamespace(data=list(self.table.rows))


class FakeTable:
    def __init__(self, name):
        self.name = name
        self.rows = []
        self.calls = []
        self.error = None

    def insert(self, payload):
        self.calls.append(("insert", payload, {}))
        return FakeQuery(self, lambda: self.rows.append(payload))

    def upsert(self, payload, on_conflict="", ignore_duplicates=False):
        self.calls.append(("upsert", payload, {"on_conflict": on_conflict, "ignore_duplicates": ignore_duplicates}))

        def write():
            for i, row in enumerate(self.rows):
                if on_conflict and row.get(on_conflict) == payload.get(on_conflict):
                    if not ignore_duplicates:
                        self.rows[i] = payload
                    return
            self.rows.append(payload)

        return FakeQuery(self, write)


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.calls = []

    def get_user(self, jwt=None):
        self.calls.append(jwt)
        if jwt not in self.tokens:
            raise FakeAPIError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self.tokens[jwt]))


class FakeSupabase:
    def __init__(self):
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self.tables = {}

    def table(self, name):
        return self.tables.setdefault(name, FakeTable(name))


@pytest.fixture
def supabase(monkeypatch):
    fake = FakeSupabase()
    fake.auth.tokens[ACCESS_TOKEN] = USER_ID
    monkeypatch.setattr(backend, "_client", fake)
    return fake


@pytest.fixture
def signed_in(client, supabase):
    session = client.session
    session[SESSION_KEY] = {"user_id": USER_ID, "access_token": ACCESS_TOKEN}
    session.save()
    return client
