from tests.conftest import auth_headers


def test_messaging_round_trip(client, student, helper_a):
    resp = client.post(
        "/api/messages",
        json={"receiver_id": helper_a.id, "content": "Can you start today?"},
        headers=auth_headers(student),
    )
    assert resp.status_code == 201
    assert resp.json()["is_read"] is False

    assert client.get("/api/messages/unread-count", headers=auth_headers(helper_a)).json() == {"count": 1}

    conversations = client.get("/api/messages", headers=auth_headers(helper_a)).json()
    assert len(conversations) == 1
    assert conversations[0]["user"]["username"] == "sadia"
    assert conversations[0]["unread_count"] == 1

    detail = client.get(f"/api/messages/{student.id}", headers=auth_headers(helper_a)).json()
    assert [m["content"] for m in detail["messages"]] == ["Can you start today?"]
    assert client.get("/api/messages/unread-count", headers=auth_headers(helper_a)).json() == {"count": 0}


def test_message_errors(client, student):
    resp = client.post(
        "/api/messages",
        json={"receiver_id": student.id, "content": "note to self"},
        headers=auth_headers(student),
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/messages",
        json={"receiver_id": 9999, "content": "hello"},
        headers=auth_headers(student),
    )
    assert resp.status_code == 404

    resp = client.post(
        "/api/messages",
        json={"receiver_id": student.id, "content": ""},
        headers=auth_headers(student),
    )
    assert resp.status_code == 400

    assert client.get("/api/messages").status_code == 401


def test_notifications_mark_read(client, student, helper_a):
    for text in ("first", "second"):
        client.post(
            "/api/messages",
            json={"receiver_id": helper_a.id, "content": text},
            headers=auth_headers(student),
        )

    headers = auth_headers(helper_a)
    notifications = client.get("/api/notifications", headers=headers).json()
    assert len(notifications) == 2
    assert all(n["type"] == "message" for n in notifications)

    resp = client.post("/api/notifications/mark-read", json={"id": notifications[0]["id"]}, headers=headers)
    assert resp.status_code == 200
    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 1}

    resp = client.post("/api/notifications/mark-read", headers=headers)
    assert resp.status_code == 200
    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 0}

    # someone else's notification
    resp = client.post(
        "/api/notifications/mark-read",
        json={"id": notifications[0]["id"]},
        headers=auth_headers(student),
    )
    assert resp.status_code == 404


def test_doubt_and_answer_flow(client, student, helper_a, helper_b):
    resp = client.post(
        "/api/doubts",
        json={
            "title": "Integration by parts",
            "question": "How do I choose u and dv for x*e^x?",
            "subject": "Mathematics",
        },
        headers=auth_headers(student),
    )
    assert resp.status_code == 201
    doubt = resp.json()
    assert doubt["status"] == "open"
    assert doubt["budget"] == 100

    answers = []
    for helper in (helper_a, helper_b):
        resp = client.post(
            "/api/answers",
            json={"doubt_id": doubt["id"], "answer": "Pick u = x so that du is simpler."},
            headers=auth_headers(helper),
        )
        assert resp.status_code == 201
        answers.append(resp.json())

    recent = client.get("/api/doubts/recent").json()
    assert recent[0]["answer_count"] == 2
    assert recent[0]["student"]["username"] == "sadia"

    resp = client.patch(f"/api/answers/{answers[0]['id']}/accept", headers=auth_headers(helper_a))
    assert resp.status_code == 403

    resp = client.patch(f"/api/answers/{answers[0]['id']}/accept", headers=auth_headers(student))
    assert resp.status_code == 200
    assert resp.json()["is_accepted"] is True

    detail = client.get(f"/api/doubts/{doubt['id']}").json()
    assert detail["status"] == "answered"
    assert detail["helper_id"] == helper_a.id
    assert len(detail["answers"]) == 2

    resp = client.patch(f"/api/answers/{answers[1]['id']}/accept", headers=auth_headers(student))
    assert resp.status_code == 409

    resp = client.post(
        "/api/answers",
        json={"doubt_id": doubt["id"], "answer": "Another approach entirely."},
        headers=auth_headers(helper_b),
    )
    assert resp.status_code == 409

    assert [d["id"] for d in client.get(f"/api/doubts/helper/{helper_a.id}").json()] == [doubt["id"]]
    assert len(client.get(f"/api/answers/helper/{helper_b.id}").json()) == 1


def test_doubt_can_only_be_closed_by_owner(client, student, other_student):
    doubt = client.post(
        "/api/doubts",
        json={
            "title": "Stoichiometry",
            "question": "Why is the limiting reagent the one that runs out first?",
            "subject": "Chemistry",
        },
        headers=auth_headers(student),
    ).json()

    resp = client.patch(
        f"/api/doubts/{doubt['id']}", json={"status": "closed"}, headers=auth_headers(other_student)
    )
    assert resp.status_code == 403

    resp = client.patch(
        f"/api/doubts/{doubt['id']}", json={"status": "answered"}, headers=auth_headers(student)
    )
    assert resp.status_code == 400

    resp = client.patch(
        f"/api/doubts/{doubt['id']}", json={"status": "closed"}, headers=auth_headers(student)
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "closed"

    by_subject = client.get("/api/doubts/subject/Chemistry").json()
    assert [d["status"] for d in by_subject] == ["closed"]
