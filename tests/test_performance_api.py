import pytest
from datetime import datetime, timedelta, timezone
from fastapi import status

TEMPLATE_BODY = {
    "title": "Engineering review",
    "description": "Quarterly engineering template",
    "categories": [
        {"name": "Quality", "weight": 30, "criteria": [{"title": "Accuracy"}]},
        {"name": "Delivery", "weight": 70, "criteria": [{"title": "Timeliness"}]},
    ],
}


def _create_template(client, headers, **overrides):
    response = client.post("/api/hr/performance/templates", headers=headers, json={**TEMPLATE_BODY, **overrides})
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def _create_cycle(client, headers, template_id, types=("SELF", "MANAGER"), **overrides):
    body = {
        "title": "Q1 2024",
        "templateId": template_id,
        "startDate": "2024-01-01",
        "endDate": "2024-03-31",
        "evaluationTypes": list(types),
        **overrides,
    }
    response = client.post("/api/hr/performance/cycles", headers=headers, json=body)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


@pytest.fixture
def alice_and_bob(db_session, make_user, admin_user):
    bob = make_user("bob")
    alice = make_user("alice", manager=bob)
    return alice, bob


def test_cycle_crud_uses_camel_case(client, auth_headers):
    template = _create_template(client, auth_headers)
    assert template["createdById"] is not None

    cycle = _create_cycle(client, auth_headers, template["id"], types=("SELF", "SELF", "PEER"))
    assert cycle["status"] == "DRAFT"
    assert cycle["evaluationTypes"] == ["SELF", "PEER"]
    assert cycle["template"]["title"] == "Engineering review"

    response = client.get(f"/api/hr/performance/cycles/{cycle['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["templateId"] == template["id"]


def test_cycle_validation_errors(client, auth_headers):
    template = _create_template(client, auth_headers)
    response = client.post(
        "/api/hr/performance/cycles",
        headers=auth_headers,
        json={"title": "Bad", "templateId": template["id"], "startDate": "2024-05-01",
              "endDate": "2024-01-01", "evaluationTypes": ["SELF"]},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["success"] is False

    response = client.post(
        "/api/hr/performance/cycles",
        headers=auth_headers,
        json={"title": "No types", "templateId": template["id"], "startDate": "2024-01-01",
              "endDate": "2024-02-01", "evaluationTypes": []},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_cycle_with_unknown_template_is_not_found(client, auth_headers):
    response = client.post(
        "/api/hr/performance/cycles",
        headers=auth_headers,
        json={"title": "X", "templateId": "missing", "startDate": "2024-01-01",
              "endDate": "2024-02-01", "evaluationTypes": ["SELF"]},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"


def test_publish_endpoint(client, auth_headers, alice_and_bob, admin_user):
    alice, bob = alice_and_bob
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"])

    response = client.post(
        f"/api/hr/performance/cycles/{cycle['id']}/publish",
        headers=auth_headers,
        json={"targetEmployeeIds": [alice.id, bob.id]},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["evaluationsCreated"] == 3
    assert body["cycle"]["status"] == "PUBLISHED"
    assert body["cycle"]["publishedById"] == admin_user.id
    assert body["cycle"]["publishedAt"] is not None

    response = client.get(f"/api/hr/performance/cycles/{cycle['id']}/evaluations", headers=auth_headers)
    page = response.json()
    assert page["meta"]["total"] == 3
    assert {e["period"] for e in page["data"]} == {"2024-01-01_2024-03-31"}
    assert page["data"][0]["categories"][0]["criteria"][0]["title"] in ("Accuracy", "Timeliness")


def test_publish_without_body_targets_all_active(client, auth_headers, alice_and_bob):
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"], types=("SELF",))

    response = client.post(f"/api/hr/performance/cycles/{cycle['id']}/publish", headers=auth_headers)
    assert response.status_code == 200
    # admin, alice and bob
    assert response.json()["evaluationsCreated"] == 3


def test_second_publish_points_to_republish(client, auth_headers, alice_and_bob):
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"], types=("SELF",))
    client.post(f"/api/hr/performance/cycles/{cycle['id']}/publish", headers=auth_headers)

    response = client.post(f"/api/hr/performance/cycles/{cycle['id']}/publish", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    error = response.json()["errors"][0]
    assert error["msg"] == "Cycle is already published. Use republish instead."
    assert error["code"] == "CYCLE_ALREADY_PUBLISHED"


def test_republish_endpoint_regenerates(client, auth_headers, alice_and_bob):
    alice, _ = alice_and_bob
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"], types=("SELF",))
    client.post(f"/api/hr/performance/cycles/{cycle['id']}/publish", headers=auth_headers)
    before = client.get(f"/api/hr/performance/cycles/{cycle['id']}/evaluations", headers=auth_headers).json()
    old_ids = {e["id"] for e in before["data"]}

    response = client.post(
        f"/api/hr/performance/cycles/{cycle['id']}/republish",
        headers=auth_headers,
        json={"targetEmployeeIds": [alice.id]},
    )
    assert response.status_code == 200
    assert response.json()["evaluationsCreated"] == 1

    after = client.get(f"/api/hr/performance/cycles/{cycle['id']}/evaluations", headers=auth_headers).json()
    assert after["meta"]["total"] == 1
    assert old_ids.isdisjoint({e["id"] for e in after["data"]})


def test_cycle_lifecycle_close_update_delete(client, auth_headers, alice_and_bob):
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"], types=("SELF",))

    response = client.put(f"/api/hr/performance/cycles/{cycle['id']}", headers=auth_headers,
                          json={"title": "Renamed"})
    assert response.json()["title"] == "Renamed"

    response = client.post(f"/api/hr/performance/cycles/{cycle['id']}/close", headers=auth_headers)
    assert response.status_code == 400

    client.post(f"/api/hr/performance/cycles/{cycle['id']}/publish", headers=auth_headers)
    response = client.put(f"/api/hr/performance/cycles/{cycle['id']}", headers=auth_headers, json={"title": "Late"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "CYCLE_NOT_EDITABLE"

    response = client.post(f"/api/hr/performance/cycles/{cycle['id']}/close", headers=auth_headers)
    assert response.json()["status"] == "CLOSED"

    response = client.post(f"/api/hr/performance/cycles/{cycle['id']}/publish", headers=auth_headers)
    assert response.json()["errors"][0]["code"] == "CYCLE_CLOSED"

    response = client.delete(f"/api/hr/performance/cycles/{cycle['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    response = client.get("/api/hr/performance/evaluations", headers=auth_headers)
    assert response.json()["meta"]["total"] == 0


def test_template_in_use_cannot_be_deleted(client, auth_headers):
    template = _create_template(client, auth_headers)
    _create_cycle(client, auth_headers, template["id"])

    response = client.delete(f"/api/hr/performance/templates/{template['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    unused = _create_template(client, auth_headers, title="Unused")
    response = client.delete(f"/api/hr/performance/templates/{unused['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT


def test_pagination_envelope_and_search(client, auth_headers):
    for title in ("Alpha", "Beta", "alphabet", "Gamma"):
        _create_template(client, auth_headers, title=title, description=None)

    response = client.get("/api/hr/performance/templates?page=1&limit=3", headers=auth_headers)
    body = response.json()
    assert len(body["data"]) == 3
    assert body["meta"] == {
        "page": 1, "limit": 3, "total": 4, "totalPages": 2, "hasNext": True, "hasPrev": False,
    }

    # Search is a case-sensitive substring match
    response = client.get("/api/hr/performance/templates?search=Alpha", headers=auth_headers)
    assert [t["title"] for t in response.json()["data"]] == ["Alpha"]

    response = client.get("/api/hr/performance/templates?sortBy=title&sortOrder=ASC", headers=auth_headers)
    assert [t["title"] for t in response.json()["data"]] == ["Alpha", "Beta", "Gamma", "alphabet"]

    response = client.get("/api/hr/performance/templates?sortBy=nonsense", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_SORT_FIELD"


def test_direct_evaluation_duplicate_is_conflict(client, auth_headers, alice_and_bob):
    alice, bob = alice_and_bob
    body = {
        "employeeId": alice.id,
        "evaluatorId": bob.id,
        "evaluationType": "MANAGER",
        "period": "2024-Q1",
        "startDate": "2024-01-01",
        "endDate": "2024-03-31",
    }
    response = client.post("/api/hr/performance/evaluations", headers=auth_headers, json=body)
    assert response.status_code == status.HTTP_201_CREATED
    evaluation_id = response.json()["id"]

    response = client.post("/api/hr/performance/evaluations", headers=auth_headers, json=body)
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.put(f"/api/hr/performance/evaluations/{evaluation_id}", headers=auth_headers,
                          json={"status": "SUBMITTED", "overallRating": 4})
    assert response.json()["submittedAt"] is not None
    assert response.json()["reviewedAt"] is None

    response = client.put(f"/api/hr/performance/evaluations/{evaluation_id}", headers=auth_headers,
                          json={"status": "APPROVED"})
    assert response.json()["reviewedAt"] is not None

    stats = client.get(f"/api/hr/performance/employees/{alice.id}/statistics", headers=auth_headers).json()
    assert stats["averageRating"] == 4.0
    assert stats["totalEvaluations"] == 1

    listed = client.get(f"/api/hr/performance/employees/{alice.id}/evaluations?period=2024-Q1",
                        headers=auth_headers).json()
    assert [e["id"] for e in listed] == [evaluation_id]


def test_statistics_for_employee_without_evaluations(client, auth_headers, alice_and_bob):
    alice, _ = alice_and_bob
    stats = client.get(f"/api/hr/performance/employees/{alice.id}/statistics", headers=auth_headers).json()
    assert stats == {"averageRating": 0, "totalEvaluations": 0, "lastEvaluationDate": None}


def test_goal_progress_and_overdue(client, auth_headers, alice_and_bob):
    alice, bob = alice_and_bob
    future = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()

    goal = client.post("/api/hr/performance/goals", headers=auth_headers, json={
        "employeeId": alice.id, "setterId": bob.id, "title": "Ship it", "description": "Release v2",
        "deadline": future,
    }).json()
    response = client.put(f"/api/hr/performance/goals/{goal['id']}", headers=auth_headers, json={"progress": 100})
    assert response.json()["status"] == "COMPLETED"
    assert response.json()["completedAt"] is not None

    late = client.post("/api/hr/performance/goals", headers=auth_headers, json={
        "employeeId": alice.id, "title": "Late", "description": "Already overdue", "deadline": past,
    }).json()
    response = client.put(f"/api/hr/performance/goals/{late['id']}", headers=auth_headers, json={"progress": 10})
    assert response.json()["status"] == "OVERDUE"

    response = client.get(f"/api/hr/performance/goals?employeeId={alice.id}&status=OVERDUE", headers=auth_headers)
    assert [g["id"] for g in response.json()["data"]] == [late["id"]]


def test_employee_cannot_publish(client, make_user, get_token):
    employee = make_user("plain")
    response = client.post(
        "/api/hr/performance/cycles/whatever/publish",
        headers={"Authorization": f"Bearer {get_token(employee)}"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def _null_rejected(response, field):
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY, response.text
    body = response.json()
    assert body["success"] is False
    assert f"{field} cannot be null" in body["errors"][0]["msg"]


def test_updates_reject_null_for_required_fields(client, auth_headers, alice_and_bob):
    alice, bob = alice_and_bob
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"], types=("SELF",))
    cycle_url = f"/api/hr/performance/cycles/{cycle['id']}"

    _null_rejected(client.put(cycle_url, headers=auth_headers, json={"startDate": None}), "startDate")
    _null_rejected(client.put(cycle_url, headers=auth_headers, json={"evaluationTypes": None}), "evaluationTypes")
    _null_rejected(
        client.put(f"/api/hr/performance/templates/{template['id']}", headers=auth_headers, json={"title": None}),
        "title",
    )

    # Nullable columns can still be cleared
    response = client.put(cycle_url, headers=auth_headers, json={"description": None, "submissionDeadline": None})
    assert response.status_code == 200
    assert response.json()["description"] is None
    assert response.json()["startDate"] == "2024-01-01"

    evaluation = client.post("/api/hr/performance/evaluations", headers=auth_headers, json={
        "employeeId": alice.id, "evaluatorId": bob.id, "evaluationType": "MANAGER",
        "period": "2024-Q2", "startDate": "2024-04-01", "endDate": "2024-06-30",
    }).json()
    _null_rejected(
        client.put(f"/api/hr/performance/evaluations/{evaluation['id']}", headers=auth_headers,
                   json={"status": None}),
        "status",
    )

    goal = client.post("/api/hr/performance/goals", headers=auth_headers, json={
        "employeeId": alice.id, "title": "Mentor", "description": "Pair weekly",
        "deadline": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
    }).json()
    _null_rejected(
        client.put(f"/api/hr/performance/goals/{goal['id']}", headers=auth_headers, json={"deadline": None}),
        "deadline",
    )


def test_deleting_user_removes_their_evaluations_and_goals(client, auth_headers, alice_and_bob):
    alice, bob = alice_and_bob
    alice_id, bob_id = alice.id, bob.id
    template = _create_template(client, auth_headers)
    cycle = _create_cycle(client, auth_headers, template["id"])
    response = client.post(
        f"/api/hr/performance/cycles/{cycle['id']}/publish",
        headers=auth_headers,
        json={"targetEmployeeIds": [alice_id, bob_id]},
    )
    assert response.json()["evaluationsCreated"] == 3
    client.post("/api/hr/performance/goals", headers=auth_headers, json={
        "employeeId": alice_id, "setterId": bob_id, "title": "Learn", "description": "Finish course",
        "deadline": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
    })

    response = client.delete(f"/api/admin/users/{alice_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    page = client.get(f"/api/hr/performance/cycles/{cycle['id']}/evaluations", headers=auth_headers).json()
    # Only bob's self evaluation survives; alice's self and manager rows are gone
    assert page["meta"]["total"] == 1
    assert [(e["employeeId"], e["evaluatorId"]) for e in page["data"]] == [(bob_id, bob_id)]

    goals = client.get(f"/api/hr/performance/goals?employeeId={alice_id}", headers=auth_headers).json()
    assert goals["meta"]["total"] == 0
