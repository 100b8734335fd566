"""Participation Routes — entering draws and listing participants.

Invariants:
    - Only role `user` participates, with accept_terms=true, in active draws
    - Second participation returns 409 ALREADY_PARTICIPATED
    - A duplicate that slips past the pre-check is still a 409 (DB constraint);
      other integrity failures are not reported as duplicates
    - Terms are checked before the draw is looked up
    - Malformed limit/offset fall back to defaults instead of a 400
    - Participant list is owner-only and paginated (limit <= 100, default 50)
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from draws.core.errors import AlreadyParticipatedError
from draws.models.draw_participant import DrawParticipant
from draws.services.participation_service import ParticipationService


# ─── Participate ─────────────────────────────────────────────────

async def test_participate(client, make_draw, customer, auth):
    draw = await make_draw()

    res = await client.post(
        f"/api/v1/draws/{draw.id}/participate",
        json={"accept_terms": True}, headers=auth(customer),
    )

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["draw_id"] == str(draw.id)
    assert data["user_id"] == str(customer.id)
    assert data["participated_at"]


async def test_participate_twice_conflicts(client, make_draw, customer, auth):
    draw = await make_draw()
    url = f"/api/v1/draws/{draw.id}/participate"
    first = await client.post(url, json={"accept_terms": True}, headers=auth(customer))
    assert first.status_code == 201

    second = await client.post(url, json={"accept_terms": True}, headers=auth(customer))

    assert second.status_code == 409
    assert second.json()["success"] is False
    assert second.json()["code"] == "ALREADY_PARTICIPATED"


async def test_participate_requires_terms(client, make_draw, customer, auth):
    draw = await make_draw()
    res = await client.post(
        f"/api/v1/draws/{draw.id}/participate",
        json={"accept_terms": False}, headers=auth(customer),
    )
    assert res.status_code == 400
    assert res.json()["code"] == "TERMS_NOT_ACCEPTED"


async def test_participate_without_body_requires_terms(client, make_draw, customer, auth):
    draw = await make_draw()
    res = await client.post(f"/api/v1/draws/{draw.id}/participate", headers=auth(customer))
    assert res.status_code == 400
    assert res.json()["code"] == "TERMS_NOT_ACCEPTED"


async def test_participate_inactive_draw_unavailable(client, make_draw, customer, auth):
    draw = await make_draw(status="completed")
    res = await client.post(
        f"/api/v1/draws/{draw.id}/participate",
        json={"accept_terms": True}, headers=auth(customer),
    )
    assert res.status_code == 400
    assert res.json()["code"] == "DRAW_NOT_AVAILABLE"


async def test_participate_terms_checked_before_lookup(client, customer, auth):
    res = await client.post(
        f"/api/v1/draws/{uuid4()}/participate",
        json={"accept_terms": False}, headers=auth(customer),
    )
    assert res.status_code == 400
    assert res.json()["code"] == "TERMS_NOT_ACCEPTED"


async def test_participate_unknown_draw(client, customer, auth):
    res = await client.post(
        f"/api/v1/draws/{uuid4()}/participate",
        json={"accept_terms": True}, headers=auth(customer),
    )
    assert res.status_code == 404


async def test_participate_restaurant_forbidden(client, make_draw, restaurant, auth):
    draw = await make_draw()
    res = await client.post(
        f"/api/v1/draws/{draw.id}/participate",
        json={"accept_terms": True}, headers=auth(restaurant),
    )
    assert res.status_code == 403


async def test_participate_requires_authentication(client, make_draw):
    draw = await make_draw()
    res = await client.post(
        f"/api/v1/draws/{draw.id}/participate", json={"accept_terms": True},
    )
    assert res.status_code == 401


async def test_participation_locks_draw(client, make_draw, restaurant, customer, auth):
    draw = await make_draw()
    await client.post(
        f"/api/v1/draws/{draw.id}/participate",
        json={"accept_terms": True}, headers=auth(customer),
    )

    res = await client.patch(
        f"/api/v1/draws/{draw.id}", json={"prize_name": "Changed prize"},
        headers=auth(restaurant),
    )

    assert res.status_code == 400
    assert res.json()["code"] == "DRAW_HAS_PARTICIPANTS"


async def test_duplicate_rejected_by_constraint(
    test_db, make_draw, customer, add_participant, monkeypatch,
):
    """Two racing requests both pass the pre-check; the unique constraint decides."""
    draw = await make_draw()
    draw_id = draw.id
    await add_participant(draw, customer)

    async def _not_yet(*args, **kwargs):
        return False

    monkeypatch.setattr(
        "draws.services.participation_service.has_participated", _not_yet,
    )

    with pytest.raises(AlreadyParticipatedError):
        await ParticipationService(test_db).participate(draw_id, customer, True)

    count = (await test_db.execute(
        select(func.count(DrawParticipant.id))
        .where(DrawParticipant.draw_id == draw_id),
    )).scalar_one()
    assert count == 1


async def test_other_integrity_errors_propagate(
    test_db, make_draw, customer, monkeypatch,
):
    """Only the unique (draw, user) violation means already participated."""
    draw = await make_draw()

    async def _fk_violation():
        raise IntegrityError(
            "INSERT INTO draw_participants", {},
            Exception("FOREIGN KEY constraint failed"),
        )

    monkeypatch.setattr(test_db, "commit", _fk_violation)

    with pytest.raises(IntegrityError):
        await ParticipationService(test_db).participate(draw.id, customer, True)


# ─── Participants list ───────────────────────────────────────────

async def test_list_participants(
    client, make_draw, restaurant, customer, second_customer, add_participant, auth,
):
    draw = await make_draw()
    await add_participant(draw, customer)
    await add_participant(draw, second_customer)

    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants", headers=auth(restaurant),
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 2
    assert data["limit"] == 50
    assert data["offset"] == 0
    assert [p["user_name"] for p in data["participants"]] == ["Bruno", "Alice"]
    assert data["participants"][0]["user_email"] == "bruno@example.test"


async def test_list_participants_paginates(
    client, make_draw, restaurant, customer, second_customer, add_participant, auth,
):
    draw = await make_draw()
    await add_participant(draw, customer)
    await add_participant(draw, second_customer)

    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants",
        params={"limit": 1, "offset": 1}, headers=auth(restaurant),
    )

    data = res.json()["data"]
    assert data["total"] == 2
    assert len(data["participants"]) == 1
    assert data["participants"][0]["user_name"] == "Alice"


async def test_list_participants_clamps_paging(client, make_draw, restaurant, auth):
    draw = await make_draw()
    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants",
        params={"limit": 1000, "offset": -4}, headers=auth(restaurant),
    )
    data = res.json()["data"]
    assert (data["limit"], data["offset"]) == (100, 0)


async def test_list_participants_malformed_paging_falls_back(
    client, make_draw, restaurant, customer, add_participant, auth,
):
    draw = await make_draw()
    await add_participant(draw, customer)

    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants",
        params={"limit": "abc", "offset": "zz"}, headers=auth(restaurant),
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert (data["limit"], data["offset"]) == (50, 0)
    assert data["total"] == 1


async def test_list_participants_partly_numeric_paging(client, make_draw, restaurant, auth):
    draw = await make_draw()
    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants",
        params={"limit": "10rows", "offset": "2"}, headers=auth(restaurant),
    )
    data = res.json()["data"]
    assert (data["limit"], data["offset"]) == (10, 2)


async def test_list_participants_owner_only(client, make_draw, other_restaurant, customer, auth):
    draw = await make_draw()
    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants", headers=auth(other_restaurant),
    )
    assert res.status_code == 403

    res = await client.get(
        f"/api/v1/draws/{draw.id}/participants", headers=auth(customer),
    )
    assert res.status_code == 403


async def test_list_participants_unknown_draw(client, restaurant, auth):
    res = await client.get(
        f"/api/v1/draws/{uuid4()}/participants", headers=auth(restaurant),
    )
    assert res.status_code == 404
