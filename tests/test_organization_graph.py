import pytest
from app.services.organization import OrganizationGraph


@pytest.fixture
def org_tree(make_user):
    """
    ceo
    ├── cto
    │   ├── dev1
    │   └── dev2 (inactive)
    └── cfo
    """
    ceo = make_user("ceo")
    cto = make_user("cto", manager=ceo)
    cfo = make_user("cfo", manager=ceo)
    dev1 = make_user("dev1", manager=cto)
    dev2 = make_user("dev2", manager=cto, is_active=False)
    return {"ceo": ceo, "cto": cto, "cfo": cfo, "dev1": dev1, "dev2": dev2}


def _ids(users):
    return {u.id for u in users}


def test_subordinates_are_direct_reports_only(db_session, org_tree):
    graph = OrganizationGraph(db_session)
    assert _ids(graph.subordinates_of(org_tree["ceo"].id)) == {org_tree["cto"].id, org_tree["cfo"].id}
    # Inactive direct reports are still direct reports
    assert _ids(graph.subordinates_of(org_tree["cto"].id)) == {org_tree["dev1"].id, org_tree["dev2"].id}


def test_unknown_employee_yields_empty_results(db_session, org_tree):
    graph = OrganizationGraph(db_session)
    assert graph.subordinates_of("missing") == []
    assert graph.all_subordinates_recursive("missing") == []
    assert graph.peers_of("missing") == []
    assert graph.employees_under_hierarchy("missing") == []


def test_recursive_subordinates_include_every_level(db_session, org_tree):
    graph = OrganizationGraph(db_session)
    found = _ids(graph.all_subordinates_recursive(org_tree["ceo"].id))
    assert found == {org_tree[k].id for k in ("cto", "cfo", "dev1", "dev2")}


def test_direct_subordinate_is_in_both_views(db_session, org_tree):
    graph = OrganizationGraph(db_session)
    for boss in org_tree.values():
        recursive = _ids(graph.all_subordinates_recursive(boss.id))
        for direct in graph.subordinates_of(boss.id):
            assert direct.id in recursive


def test_recursive_walk_survives_manager_cycle(db_session, make_user):
    a = make_user("a")
    b = make_user("b", manager=a)
    c = make_user("c", manager=b)
    a.manager_id = c.id
    db_session.commit()

    graph = OrganizationGraph(db_session)
    for user in (a, b, c):
        result = graph.all_subordinates_recursive(user.id)
        assert user.id not in _ids(result)
        assert len(result) == 2


def test_self_managed_employee_is_not_its_own_subordinate(db_session, make_user):
    loner = make_user("loner")
    loner.manager_id = loner.id
    db_session.commit()

    assert OrganizationGraph(db_session).all_subordinates_recursive(loner.id) == []


def test_root_level_employee_has_no_peers(db_session, org_tree, make_user):
    other_root = make_user("other")
    graph = OrganizationGraph(db_session)
    assert graph.peers_of(org_tree["ceo"].id) == []
    assert graph.peers_of(other_root.id) == []


def test_peers_share_manager_and_are_active(db_session, org_tree, make_user):
    dev3 = make_user("dev3", manager=org_tree["cto"])
    graph = OrganizationGraph(db_session)

    assert _ids(graph.peers_of(org_tree["cto"].id)) == {org_tree["cfo"].id}
    # dev2 is inactive and excluded; dev1 never appears among its own peers
    assert _ids(graph.peers_of(org_tree["dev1"].id)) == {dev3.id}


def test_hierarchy_with_root_puts_root_first(db_session, org_tree):
    result = OrganizationGraph(db_session).employees_under_hierarchy(org_tree["cto"].id)
    assert result[0].id == org_tree["cto"].id
    assert _ids(result[1:]) == {org_tree["dev1"].id, org_tree["dev2"].id}


def test_hierarchy_without_root_lists_active_employees(db_session, org_tree):
    result = OrganizationGraph(db_session).employees_under_hierarchy()
    assert _ids(result) == {org_tree[k].id for k in ("ceo", "cto", "cfo", "dev1")}


def test_hierarchy_with_inactive_root_is_empty(db_session, org_tree):
    assert OrganizationGraph(db_session).employees_under_hierarchy(org_tree["dev2"].id) == []


def test_find_manager_cycles(db_session, org_tree, make_user):
    graph = OrganizationGraph(db_session)
    assert graph.find_manager_cycles() == []

    a = make_user("a")
    b = make_user("b", manager=a)
    a.manager_id = b.id
    db_session.commit()

    cycles = graph.find_manager_cycles()
    assert len(cycles) == 1
    assert set(cycles[0]) == {a.id, b.id}


def test_hierarchy_endpoints(client, auth_headers, org_tree):
    ceo_id = org_tree["ceo"].id
    response = client.get(f"/api/admin/users/{ceo_id}/subordinates", headers=auth_headers)
    assert response.status_code == 200
    assert {u["id"] for u in response.json()} == {org_tree["cto"].id, org_tree["cfo"].id}

    response = client.get(f"/api/admin/users/{ceo_id}/subordinates?recursive=true", headers=auth_headers)
    assert len(response.json()) == 4

    response = client.get(f"/api/admin/users/{org_tree['cfo'].id}/peers", headers=auth_headers)
    assert [u["id"] for u in response.json()] == [org_tree["cto"].id]

    response = client.get(f"/api/admin/users/hierarchy?rootId={org_tree['cto'].id}", headers=auth_headers)
    assert response.json()[0]["id"] == org_tree["cto"].id
    assert "managerId" in response.json()[1]
