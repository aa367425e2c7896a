from signup.core import errors
from signup.core.utils import MIN_CODE_BYTES
from signup.models.session import Visibility


DEMO = {
    "title": "Demo",
    "date": "2025-01-01",
    "time": "10:00",
    "location": "Room A",
    "max_participants": 1,
    "visibility": "public",
}


# =====================================================================
# CREATE
# =====================================================================
def test_create_public_session(registry):
    created, err = registry.create(DEMO)

    assert err is None
    assert created["id"] == 1
    assert len(created["management_code"]) == MIN_CODE_BYTES * 2
    assert created["management_link"] == f"/sessions/1/edit?management_code={created['management_code']}"
    assert created["share_link"] == "/sessions/1/attend"

    session, err = registry.get_by_management_code(created["management_code"])
    assert err is None
    assert session.visibility == Visibility.public
    assert session.invite_token is None
    assert session.max_participants == 1


def test_create_private_session_carries_invite_token_in_share_link(registry):
    created, err = registry.create({**DEMO, "visibility": "private"})
    assert err is None

    session, _ = registry.get_by_management_code(created["management_code"])
    assert session.invite_token
    assert session.invite_token != session.management_code
    assert created["share_link"] == f"/sessions/{created['id']}/attend?invite_token={session.invite_token}"


def test_links_use_public_base_url(database, settings):
    from signup.services.session_registry import SessionRegistry

    registry = SessionRegistry(database, settings.model_copy(update={"PUBLIC_BASE_URL": "https://example.org/"}))
    created, _ = registry.create(DEMO)
    assert created["share_link"] == f"https://example.org/sessions/{created['id']}/attend"


def test_create_rejects_invalid_fields(registry):
    missing_title = {k: v for k, v in DEMO.items() if k != "title"}
    assert registry.create(missing_title) == (None, errors.VALIDATION)
    assert registry.create({**DEMO, "location": "   "}) == (None, errors.VALIDATION)
    assert registry.create({**DEMO, "max_participants": 0}) == (None, errors.VALIDATION)
    assert registry.create({**DEMO, "visibility": "secret"}) == (None, errors.VALIDATION)
    assert registry.create({}) == (None, errors.VALIDATION)


def test_create_accepts_camel_case_capacity(registry):
    fields = {k: v for k, v in DEMO.items() if k != "max_participants"}
    created, err = registry.create({**fields, "maxParticipants": 5})
    assert err is None
    session, _ = registry.get_by_management_code(created["management_code"])
    assert session.max_participants == 5


def test_generated_codes_are_distinct(registry):
    management_codes, invite_tokens = set(), set()
    for i in range(20):
        created, _ = registry.create({**DEMO, "title": f"S{i}", "visibility": "private"})
        session, _ = registry.get_by_management_code(created["management_code"])
        management_codes.add(session.management_code)
        invite_tokens.add(session.invite_token)

    assert len(management_codes) == 20
    assert len(invite_tokens) == 20


def test_create_retries_when_generated_code_collides(registry, monkeypatch):
    codes = iter(["a" * 16, "a" * 16, "b" * 16])
    monkeypatch.setattr("signup.services.session_registry.gen_code", lambda nbytes: next(codes))

    first, err = registry.create(DEMO)
    assert err is None and first["management_code"] == "a" * 16

    second, err = registry.create(DEMO)
    assert err is None
    assert second["management_code"] == "b" * 16


def test_create_reports_conflict_when_retries_are_exhausted(registry, monkeypatch):
    monkeypatch.setattr("signup.services.session_registry.gen_code", lambda nbytes: "c" * 16)
    registry.create(DEMO)

    assert registry.create(DEMO) == (None, errors.CONFLICT)
    sessions, _ = registry.list_public()
    assert len(sessions) == 1


# =====================================================================
# READ
# =====================================================================
def test_list_public_never_returns_private_sessions(registry, make_session):
    make_session(title="Open")
    make_session(title="Hidden", visibility="private")

    sessions, err = registry.list_public()
    assert err is None
    assert [s.title for s in sessions] == ["Open"]


def test_get_public_includes_participant_count(registry, ledger, make_session):
    created = make_session()
    ledger.join(created["id"], name="Ann")
    ledger.join(created["id"])

    found, err = registry.get_public(created["id"])
    assert err is None
    assert found["session"].title == "Demo"
    assert found["participants"] == 2


def test_get_public_hides_private_and_missing(registry, make_session):
    private = make_session(visibility="private")
    assert registry.get_public(private["id"]) == (None, errors.NOT_FOUND)
    assert registry.get_public(999) == (None, errors.NOT_FOUND)


def test_get_private_accepts_invite_token_or_management_code(registry, make_session):
    created = make_session(visibility="private")
    session, _ = registry.get_by_management_code(created["management_code"])

    by_token, err = registry.get_private(session.invite_token)
    assert err is None and by_token.id == created["id"]

    by_code, err = registry.get_private(created["management_code"])
    assert err is None and by_code.id == created["id"]

    assert registry.get_private("nope") == (None, errors.NOT_FOUND)
    assert registry.get_private("") == (None, errors.NOT_FOUND)


def test_get_private_ignores_public_sessions(registry, make_session):
    public = make_session()
    assert registry.get_private(public["management_code"]) == (None, errors.NOT_FOUND)


def test_get_by_management_code(registry, make_session):
    public = make_session()
    private = make_session(visibility="private")

    assert registry.get_by_management_code(public["management_code"])[0].id == public["id"]
    assert registry.get_by_management_code(private["management_code"])[0].id == private["id"]
    assert registry.get_by_management_code("0" * 16) == (None, errors.NOT_FOUND)
    assert registry.get_by_management_code(None) == (None, errors.NOT_FOUND)


def test_get_details_returns_roster_without_codes(registry, ledger, make_session):
    created = make_session(visibility="private")
    session, _ = registry.get_by_management_code(created["management_code"])
    ledger.join(created["id"], name="Ann", invite_token=session.invite_token)
    ledger.join(created["id"], invite_token=session.invite_token)

    details, err = registry.get_details(created["id"])
    assert err is None
    assert details["participants"] == 2
    assert details["attendees"] == [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Anonymous"}]

    assert registry.get_details(999) == (None, errors.NOT_FOUND)


def test_get_details_can_require_a_code_for_private_sessions(database, settings, make_session):
    from signup.services.session_registry import SessionRegistry

    strict = SessionRegistry(database, settings.model_copy(update={"DETAILS_REQUIRE_CODE": True}))
    private = make_session(visibility="private")
    public = make_session()
    session, _ = strict.get_by_management_code(private["management_code"])

    assert strict.get_details(private["id"]) == (None, errors.NOT_FOUND)
    assert strict.get_details(private["id"], "wrong") == (None, errors.NOT_FOUND)
    assert strict.get_details(private["id"], session.invite_token)[1] is None
    assert strict.get_details(private["id"], private["management_code"])[1] is None
    assert strict.get_details(public["id"])[1] is None


def test_get_for_edit_requires_matching_id_and_code(registry, make_session):
    first = make_session()
    second = make_session(title="Other")

    session, err = registry.get_for_edit(first["id"], first["management_code"])
    assert err is None and session.management_code == first["management_code"]

    assert registry.get_for_edit(first["id"], second["management_code"]) == (None, errors.NOT_FOUND)
    assert registry.get_for_edit(999, first["management_code"]) == (None, errors.NOT_FOUND)


# =====================================================================
# UPDATE
# =====================================================================
def test_update_with_no_fields_fails_regardless_of_credentials(registry, make_session):
    created = make_session()

    assert registry.update(created["id"], created["management_code"], {}) == (None, errors.NO_FIELDS)
    assert registry.update(created["id"], "wrong", {}) == (None, errors.NO_FIELDS)
    assert registry.update(999, None, None) == (None, errors.NO_FIELDS)
    assert registry.update(created["id"], created["management_code"], {"unknown": 1}) == (None, errors.NO_FIELDS)


def test_update_checks_existence_then_code(registry, make_session):
    created = make_session()

    assert registry.update(999, created["management_code"], {"title": "X"}) == (None, errors.NOT_FOUND)
    assert registry.update(created["id"], "wrong", {"title": "X"}) == (None, errors.UNAUTHORIZED)
    assert registry.update(created["id"], None, {"title": "X"}) == (None, errors.UNAUTHORIZED)


def test_update_applies_only_supplied_fields(registry, make_session):
    created = make_session(description="old", max_participants=5)

    ok, err = registry.update(created["id"], created["management_code"], {"title": "Renamed", "max_participants": None})
    assert (ok, err) == (True, None)

    session, _ = registry.get_for_edit(created["id"], created["management_code"])
    assert session.title == "Renamed"
    assert session.max_participants is None
    assert session.description == "old"
    assert session.location == "Room A"


def test_update_rejects_null_for_required_fields(registry, make_session):
    created = make_session()
    assert registry.update(created["id"], created["management_code"], {"title": None}) == (None, errors.VALIDATION)
    assert registry.update(created["id"], created["management_code"], {"max_participants": -3}) == (None, errors.VALIDATION)


def test_visibility_change_keeps_invite_token_invariant(registry, make_session):
    created = make_session()
    code = created["management_code"]

    registry.update(created["id"], code, {"visibility": "private"})
    session, _ = registry.get_for_edit(created["id"], code)
    assert session.visibility == Visibility.private
    token = session.invite_token
    assert token

    # staying private keeps the same token
    registry.update(created["id"], code, {"visibility": "private", "title": "Still private"})
    session, _ = registry.get_for_edit(created["id"], code)
    assert session.invite_token == token

    registry.update(created["id"], code, {"visibility": "public"})
    session, _ = registry.get_for_edit(created["id"], code)
    assert session.visibility == Visibility.public
    assert session.invite_token is None


def test_switch_to_private_reports_conflict_when_tokens_keep_colliding(registry, make_session, monkeypatch):
    codes = iter(["a" * 16, "t" * 16, "b" * 16])
    monkeypatch.setattr("signup.services.session_registry.gen_code", lambda nbytes: next(codes, "t" * 16))
    make_session(title="Taken", visibility="private")
    created = make_session()

    result = registry.update(created["id"], created["management_code"], {"visibility": "private", "title": "Renamed"})

    assert result == (None, errors.CONFLICT)
    session, _ = registry.get_for_edit(created["id"], created["management_code"])
    assert session.visibility == Visibility.public
    assert session.invite_token is None
    assert session.title == "Demo"


# =====================================================================
# DELETE
# =====================================================================
def test_delete_requires_management_code(registry, make_session):
    created = make_session()

    assert registry.delete(999, created["management_code"]) == (None, errors.NOT_FOUND)
    assert registry.delete(created["id"], "wrong") == (None, errors.UNAUTHORIZED)
    assert registry.delete(created["id"], created["management_code"]) == (True, None)
    assert registry.get_public(created["id"]) == (None, errors.NOT_FOUND)


def test_delete_removes_attendances(registry, ledger, make_session):
    created = make_session()
    codes = [ledger.join(created["id"])[0] for _ in range(3)]

    registry.delete(created["id"], created["management_code"])

    for code in codes:
        assert ledger.lookup(code) == (None, errors.NOT_FOUND)
    assert registry.get_details(created["id"]) == (None, errors.NOT_FOUND)
