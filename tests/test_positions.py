import pytest
from datetime import date

from app.core.exceptions import BadRequestError, ConflictError
from app.models.assignment import Assignment
from app.models.contract import Contract, ContractStatus
from app.models.position import Position
from app.schemas.hr import PositionCreate
from app.services.position_service import PositionService


@pytest.fixture
def chart(db_session):
    """
    ceo
    └── cto
        └── lead
            └── dev
    """
    service = PositionService(db_session)
    ceo = service.create(PositionCreate(title="CEO", level=1))
    cto = service.create(PositionCreate(title="CTO", level=2, parent_id=ceo.id))
    lead = service.create(PositionCreate(title="Lead", level=3, parent_id=cto.id))
    dev = service.create(PositionCreate(title="Dev", level=4, parent_id=lead.id))
    return {"ceo": ceo, "cto": cto, "lead": lead, "dev": dev}


def test_tree_nests_children_under_parents(db_session, chart):
    roots = PositionService(db_session).find_tree()
    assert [r["title"] for r in roots] == ["CEO"]
    node = roots[0]
    for title in ("CTO", "Lead", "Dev"):
        assert len(node["children"]) == 1
        node = node["children"][0]
        assert node["title"] == title
    assert node["children"] == []


def test_flat_list_is_ordered_by_level(db_session, chart):
    flat = PositionService(db_session).find_flat()
    assert [p.title for p in flat] == ["CEO", "CTO", "Lead", "Dev"]


def test_cannot_move_under_itself_or_a_descendant(db_session, chart):
    service = PositionService(db_session)
    with pytest.raises(BadRequestError):
        service.update_parent(chart["cto"].id, chart["cto"].id)
    with pytest.raises(BadRequestError) as excinfo:
        service.update_parent(chart["cto"].id, chart["dev"].id)
    assert excinfo.value.error_code == "INVALID_PARENT"

    moved = service.update_parent(chart["dev"].id, chart["ceo"].id)
    assert moved.parent_id == chart["ceo"].id
    root = service.update_parent(chart["cto"].id, None)
    assert root.parent_id is None


def test_delete_hands_children_to_grandparent(db_session, chart):
    service = PositionService(db_session)
    service.remove(chart["lead"].id)

    db_session.expire_all()
    dev = db_session.query(Position).filter(Position.id == chart["dev"].id).one()
    assert dev.parent_id == chart["cto"].id
    assert db_session.query(Position).count() == 3


def test_delete_with_assignments_is_conflict(db_session, chart, make_user):
    contract = Contract(user_id=make_user("dev").id, start_date=date(2024, 1, 1), status=ContractStatus.ACTIVE)
    db_session.add(contract)
    db_session.commit()
    db_session.add(Assignment(contract_id=contract.id, position_id=chart["dev"].id, workload_percentage=100))
    db_session.commit()

    with pytest.raises(ConflictError):
        PositionService(db_session).remove(chart["dev"].id)


def test_reset_layout_clears_coordinates(db_session, chart):
    service = PositionService(db_session)
    service.update_coordinates(chart["ceo"].id, 10.5, 20)
    service.update_coordinates(chart["dev"].id, 1, 2)

    assert service.reset_layout() == 4
    db_session.expire_all()
    assert all(p.x is None and p.y is None for p in db_session.query(Position).all())


def test_position_endpoints(client, auth_headers):
    response = client.post("/api/admin/positions", headers=auth_headers,
                           json={"title": "Head of People", "level": 1, "department": "HR"})
    assert response.status_code == 201
    root = response.json()

    response = client.post("/api/admin/positions", headers=auth_headers,
                           json={"title": "Recruiter", "level": 2, "parentId": root["id"]})
    child = response.json()
    assert child["parentId"] == root["id"]

    response = client.patch(f"/api/admin/positions/{child['id']}/coordinates", headers=auth_headers,
                            json={"x": 100, "y": 50})
    assert response.json()["x"] == 100

    response = client.get("/api/admin/positions/tree", headers=auth_headers)
    tree = response.json()
    assert tree[0]["children"][0]["id"] == child["id"]

    response = client.patch(f"/api/admin/positions/{root['id']}/parent", headers=auth_headers,
                            json={"parentId": child["id"]})
    assert response.status_code == 400

    response = client.post("/api/admin/positions/reset-layout", headers=auth_headers)
    assert response.json()["message"] == "Layout reset for 2 positions"

    response = client.get("/api/admin/positions?search=Recruit", headers=auth_headers)
    assert [p["title"] for p in response.json()["data"]] == ["Recruiter"]


def test_employees_can_read_but_not_edit_positions(client, make_user, get_token):
    headers = {"Authorization": f"Bearer {get_token(make_user('reader'))}"}
    assert client.get("/api/admin/positions/flat", headers=headers).status_code == 200
    response = client.post("/api/admin/positions", headers=headers, json={"title": "Nope"})
    assert response.status_code == 403
