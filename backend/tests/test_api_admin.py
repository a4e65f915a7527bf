from datetime import timedelta

import pytest
from sqlalchemy import select

from wonderlake.auth.jwt import create_access_token, create_refresh_token
from wonderlake.models.address import SearchedAddress
from wonderlake.models.community import CommunityQuestion, DynamicFaq
from wonderlake.models.email import EmailCorrespondence, EmailUsage, InboundEmail
from wonderlake.services.email import current_month

QUESTION = {
    "name": "Sam Resident",
    "email": "sam@example.com",
    "question": "Will the village take over road maintenance?",
    "category": "services",
}
ANSWER = "Yes. Village public works maintains all village roads."


async def _question_id(client, session_factory):
    await client.post("/api/questions", json=QUESTION)
    async with session_factory() as session:
        return str((await session.execute(select(CommunityQuestion.id))).scalar_one())


# --- Auth ---
async def test_login_refresh_and_me(client, admin_user):
    response = await client.post("/api/auth/login", json={
        "email": "admin@onewonderlake.com",
        "password": "correct-horse",
    })
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["token_type"] == "bearer"

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.json()["email"] == "admin@onewonderlake.com"
    assert me.json()["is_admin"] is True
    assert me.json()["last_login"] is not None

    refreshed = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200


async def test_login_wrong_password(client, admin_user):
    response = await client.post("/api/auth/login", json={
        "email": "admin@onewonderlake.com",
        "password": "wrong",
    })
    assert response.status_code == 401


async def test_refresh_token_cannot_be_used_as_access_token(client, admin_user):
    token = create_refresh_token(str(admin_user.id))
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_expired_token_rejected(client, admin_user):
    token = create_access_token(str(admin_user.id), True, expires_delta=timedelta(seconds=-1))
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_admin_check(client, admin_headers, user_headers):
    assert (await client.get("/api/admin/check", headers=admin_headers)).json() == {"is_admin": True}
    assert (await client.get("/api/admin/check", headers=user_headers)).json() == {"is_admin": False}


@pytest.mark.parametrize("path", [
    "/api/admin/interested",
    "/api/admin/searched-addresses",
    "/api/admin/questions",
    "/api/admin/contacts",
    "/api/admin/emails/usage",
    "/api/admin/inbound-emails",
])
async def test_admin_endpoints_require_admin(client, user_headers, path):
    assert (await client.get(path)).status_code in (401, 403)
    assert (await client.get(path, headers=user_headers)).status_code == 403


# --- Interested parties and analytics ---
async def test_list_interested_parties(client, admin_headers):
    await client.post("/api/interested", json={
        "name": "Jane Doe",
        "email": "jane@example.com",
        "address": "4512 E Lake Shore Dr",
        "source": "tax_estimator",
    })

    parties = (await client.get("/api/admin/interested", headers=admin_headers)).json()

    assert [p["email"] for p in parties] == ["jane@example.com"]
    assert "unsubscribe_token" not in parties[0]


async def test_searched_address_reports(client, admin_headers, session_factory):
    async with session_factory() as session:
        session.add_all([
            SearchedAddress(address="1 A St", result="resident", latitude="42.38", longitude="-88.35"),
            SearchedAddress(address="2 B St", result="resident", latitude="42.381", longitude="-88.351"),
            SearchedAddress(address="3 C St", result="not_found"),
            SearchedAddress(address="4 D St", result="annexation", latitude="bad", longitude="-88.3"),
        ])
        await session.commit()

    rows = (await client.get("/api/admin/searched-addresses", headers=admin_headers)).json()
    assert len(rows) == 4

    filtered = (await client.get(
        "/api/admin/searched-addresses", params={"result": "resident"}, headers=admin_headers
    )).json()
    assert {r["address"] for r in filtered} == {"1 A St", "2 B St"}

    geojson = (await client.get("/api/admin/searched-addresses/map", headers=admin_headers)).json()
    assert geojson["type"] == "FeatureCollection"
    assert len(geojson["features"]) == 2
    assert geojson["features"][0]["geometry"]["type"] == "Point"

    summary = (await client.get("/api/admin/searched-addresses/summary", headers=admin_headers)).json()
    assert summary == {"total": 4, "by_result": {"resident": 2, "not_found": 1, "annexation": 1}}


# --- Questions and FAQs ---
async def test_answer_then_publish(client, admin_headers, session_factory):
    question_id = await _question_id(client, session_factory)

    response = await client.patch(
        f"/api/admin/questions/{question_id}/answer",
        json={"answer": ANSWER, "edited_category": "general"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "answered"
    assert response.json()["category"] == "general"
    assert response.json()["answered_at"] is not None

    response = await client.post(f"/api/admin/questions/{question_id}/publish", headers=admin_headers)
    assert response.status_code == 201
    faq = response.json()
    assert faq["source_question_id"] == question_id
    assert faq["answer"] == ANSWER
    assert faq["is_new"] is True

    questions = (await client.get(
        "/api/admin/questions", params={"status": "published"}, headers=admin_headers
    )).json()
    assert [q["id"] for q in questions] == [question_id]

    # published once only
    response = await client.post(f"/api/admin/questions/{question_id}/publish", headers=admin_headers)
    assert response.status_code == 400


async def test_publish_requires_answer(client, admin_headers, session_factory):
    question_id = await _question_id(client, session_factory)

    response = await client.post(f"/api/admin/questions/{question_id}/publish", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Question must be answered before it can be published"


async def test_answer_too_short(client, admin_headers, session_factory):
    question_id = await _question_id(client, session_factory)

    response = await client.patch(
        f"/api/admin/questions/{question_id}/answer", json={"answer": "Yes."}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_delete_question_keeps_published_faq(client, admin_headers, session_factory):
    question_id = await _question_id(client, session_factory)
    await client.patch(f"/api/admin/questions/{question_id}/answer", json={"answer": ANSWER}, headers=admin_headers)
    await client.post(f"/api/admin/questions/{question_id}/publish", headers=admin_headers)

    response = await client.delete(f"/api/admin/questions/{question_id}", headers=admin_headers)
    assert response.status_code == 204

    async with session_factory() as session:
        assert (await session.execute(select(CommunityQuestion))).scalars().all() == []
        faq = (await session.execute(select(DynamicFaq))).scalar_one()
        assert faq.source_question_id is None


async def test_unknown_question(client, admin_headers):
    response = await client.patch(
        "/api/admin/questions/00000000-0000-0000-0000-000000000000/answer",
        json={"answer": ANSWER},
        headers=admin_headers,
    )
    assert response.status_code == 404


async def test_faq_admin_lifecycle(client, admin_headers):
    response = await client.post("/api/admin/faqs", json={
        "question": "When is the annexation vote?",
        "answer": "The board will schedule a public hearing first.",
        "category": "general",
    }, headers=admin_headers)
    assert response.status_code == 201
    faq_id = response.json()["id"]

    assert (await client.post(f"/api/admin/faqs/{faq_id}/not-new", headers=admin_headers)).status_code == 405
    response = await client.patch(f"/api/admin/faqs/{faq_id}/not-new", headers=admin_headers)
    assert response.json()["is_new"] is False

    assert (await client.delete(f"/api/admin/faqs/{faq_id}", headers=admin_headers)).status_code == 204
    assert (await client.get("/api/dynamic-faqs")).json() == []


# --- Contacts ---
async def test_contact_crud(client, admin_headers):
    response = await client.post("/api/admin/contacts", json={
        "name": "Lee Trustee",
        "email": "lee@example.com",
        "phone": "815-555-0100",
    }, headers=admin_headers)
    assert response.status_code == 201
    contact = response.json()
    assert contact["source"] == "manual"

    duplicate = await client.post("/api/admin/contacts", json={
        "name": "Lee Again",
        "email": "lee@example.com",
    }, headers=admin_headers)
    assert duplicate.status_code == 409

    response = await client.patch(
        f"/api/admin/contacts/{contact['id']}", json={"notes": "Met at town hall"}, headers=admin_headers
    )
    assert response.json()["notes"] == "Met at town hall"
    assert response.json()["name"] == "Lee Trustee"

    assert len((await client.get("/api/admin/contacts", headers=admin_headers)).json()) == 1

    assert (await client.delete(f"/api/admin/contacts/{contact['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"/api/admin/contacts/{contact['id']}", headers=admin_headers)).status_code == 404


# --- Email ---
SEND = {
    "to": "jane@example.com",
    "subject": "Annexation update",
    "html_body": "<p>Hello <b>Jane</b></p>",
    "related_type": "interested",
    "related_id": "42",
}


async def test_send_email(client, admin_headers, resend, session_factory):
    response = await client.post("/api/admin/emails/send", json=SEND, headers=admin_headers)

    assert response.status_code == 201
    record = response.json()
    assert record["status"] == "sent"
    assert record["resend_email_id"] == "re_1"
    assert record["body_text"] == "Hello Jane"
    assert record["sent_by"] == "admin@onewonderlake.com"
    assert len(resend.sent) == 1

    usage = (await client.get("/api/admin/emails/usage", headers=admin_headers)).json()
    assert usage["sent_count"] == 1
    assert usage["monthly_limit"] == 3000
    assert usage["auto_shutoff_threshold"] == 2500

    listed = (await client.get(
        "/api/admin/emails", params={"related_type": "interested", "related_id": "42"}, headers=admin_headers
    )).json()
    assert len(listed) == 1


async def test_send_email_provider_failure_is_kept(client, admin_headers, resend, session_factory):
    resend.fail_sends = True

    response = await client.post("/api/admin/emails/send", json=SEND, headers=admin_headers)

    assert response.status_code == 502
    async with session_factory() as session:
        record = (await session.execute(select(EmailCorrespondence))).scalar_one()
        assert record.status == "failed"


async def test_send_email_blocked_when_shut_off(client, admin_headers, resend, session_factory):
    async with session_factory() as session:
        session.add(EmailUsage(month=current_month(), sent_count=2400, received_count=100, is_shutoff=True))
        await session.commit()

    response = await client.post("/api/admin/emails/send", json=SEND, headers=admin_headers)

    assert response.status_code == 429
    assert resend.sent == []


async def test_sending_trips_auto_shutoff(client, admin_headers, session_factory):
    async with session_factory() as session:
        session.add(EmailUsage(month=current_month(), sent_count=2499, received_count=0, is_shutoff=False))
        await session.commit()

    assert (await client.post("/api/admin/emails/send", json=SEND, headers=admin_headers)).status_code == 201
    usage = (await client.get("/api/admin/emails/usage", headers=admin_headers)).json()
    assert usage["is_shutoff"] is True

    assert (await client.post("/api/admin/emails/send", json=SEND, headers=admin_headers)).status_code == 429


async def test_inbound_webhook_and_reply(client, admin_headers, resend, session_factory):
    resend.emails["in_1"] = {"text": "When is the vote?", "html": "<p>When is the vote?</p>"}
    event = {
        "type": "email.received",
        "data": {
            "email_id": "in_1",
            "from": "resident@example.com",
            "to": ["contact@onewonderlake.com"],
            "subject": "Vote date",
        },
    }

    response = await client.post("/api/webhooks/resend/inbound", json=event)
    assert response.json()["stored"] is True

    # redelivery of the same event is ignored
    response = await client.post("/api/webhooks/resend/inbound", json=event)
    assert response.json()["stored"] is False

    inbox = (await client.get("/api/admin/inbound-emails", headers=admin_headers)).json()
    assert len(inbox) == 1
    assert inbox[0]["body_text"] == "When is the vote?"
    assert inbox[0]["to_email"] == "contact@onewonderlake.com"
    email_id = inbox[0]["id"]

    response = await client.post(f"/api/admin/inbound-emails/{email_id}/read", headers=admin_headers)
    assert response.json()["is_read"] is True

    response = await client.post(
        f"/api/admin/inbound-emails/{email_id}/reply",
        json={"html_body": "<p>The hearing is in May.</p>"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["subject"] == "Re: Vote date"
    assert response.json()["to_email"] == "resident@example.com"

    async with session_factory() as session:
        inbound = (await session.execute(select(InboundEmail))).scalar_one()
        assert inbound.is_replied is True
        assert inbound.reply_email_id == "re_1"
        usage = (await session.execute(select(EmailUsage))).scalar_one()
        assert (usage.sent_count, usage.received_count) == (1, 1)

    assert (await client.delete(f"/api/admin/inbound-emails/{email_id}", headers=admin_headers)).status_code == 204
    assert (await client.get("/api/admin/inbound-emails", headers=admin_headers)).json() == []


async def test_webhook_ignores_other_events(client, session_factory):
    response = await client.post("/api/webhooks/resend/inbound", json={"type": "email.delivered", "data": {}})

    assert response.json() == {"received": True, "stored": False}
    async with session_factory() as session:
        assert (await session.execute(select(InboundEmail))).scalars().all() == []

