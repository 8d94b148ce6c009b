"""
Feature: Manage navigation menus over HTTP
  As an admin of the site
  I want to create, inspect, rename and delete navigation menus
  So that each template location shows the right links

Scenario: Create a menu with defaults
  Given I am authenticated as an admin
  When I create a menu without a name or location
  Then the menu is called "New Menu" and placed in the header

Scenario: Delete a menu with items
  Given a menu holding a nested tree of items
  When I delete the menu
  Then all of its items are removed as well

Scenario: Public navigation
  Given an active menu at the header location with an inactive item
  When the site requests the header tree without authentication
  Then only active items are returned

Scenario: Member tries to change a menu
  Given I am authenticated as a member
  When I try to create a menu
  Then I receive a 403 Forbidden error
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine, SQLModel, select
from sqlalchemy.pool import StaticPool
from database import get_session
from main import app
from models.auth import User, Token, TokenUser, UserRole
from models.menu import Menu, MenuItem
from models.activity import ActivityLog
from navigation.mutations import MenuItemService
from settings import PAGE_IDENTIFIERS
from datetime import datetime, timezone, timedelta


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def add_user_with_token(session: Session, username: str, role: UserRole, access_token: str) -> str:
    user = User(
        username=username,
        email=f"{username}@test.com",
        hashed_password="hashed_password",
        role=role,
        is_active=True
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    token = Token(
        access_token=access_token,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=24)
    )
    session.add(token)
    session.commit()
    session.refresh(token)

    session.add(TokenUser(token_id=token.id, user_id=user.id))
    session.commit()
    return access_token


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(session: Session):
    token = add_user_with_token(session, "admin", UserRole.ADMIN, "admin_token_123")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="member_headers")
def member_headers_fixture(session: Session):
    token = add_user_with_token(session, "member", UserRole.MEMBER, "member_token_123")
    return {"Authorization": f"Bearer {token}"}


def test_create_menu_with_defaults(client, admin_headers):
    response = client.post("/api/menus", json={}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "New Menu"
    assert data["location"] == "header"
    assert data["item_count"] == 0


def test_create_menu(client, admin_headers, session):
    response = client.post("/api/menus", json={"name": "Footer Links", "location": "footer"}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Footer Links"
    assert data["location"] == "footer"

    entry = session.exec(select(ActivityLog)).first()
    assert entry.action == "created"
    assert entry.resource_type == "navigation"
    assert entry.resource_id == data["id"]


def test_create_menu_invalid_location(client, admin_headers):
    response = client.post("/api/menus", json={"name": "Top", "location": "ceiling"}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "location"


def test_create_menu_requires_token(client):
    response = client.post("/api/menus", json={"name": "Top"})

    assert response.status_code == 401


def test_create_menu_member_forbidden(client, member_headers):
    response = client.post("/api/menus", json={"name": "Top"}, headers=member_headers)

    assert response.status_code == 403


def test_list_menus_with_item_counts(client, admin_headers, session):
    header = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    footer = client.post("/api/menus", json={"name": "Footer", "location": "footer"}, headers=admin_headers).json()
    service = MenuItemService(session)
    service.create_item(header["id"], "Products", "page", "Products")
    service.create_item(header["id"], "Docs", "url", "https://docs.example.com")

    response = client.get("/api/menus", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 2
    # newest first
    assert [menu["id"] for menu in data["menus"]] == [footer["id"], header["id"]]
    counts = {menu["id"]: menu["item_count"] for menu in data["menus"]}
    assert counts == {header["id"]: 2, footer["id"]: 0}


def test_member_can_read_menus(client, admin_headers, member_headers):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()

    response = client.get(f"/api/menus/{created['id']}", headers=member_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Header"


def test_get_menu_not_found(client, admin_headers):
    response = client.get("/api/menus/999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "NOT_FOUND"


def test_update_menu(client, admin_headers):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()

    response = client.put(
        f"/api/menus/{created['id']}",
        json={"name": "Sidebar Links", "location": "sidebar"},
        headers=admin_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Sidebar Links"
    assert data["location"] == "sidebar"


def test_update_menu_blank_name(client, admin_headers):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()

    response = client.put(f"/api/menus/{created['id']}", json={"name": "  "}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "name"


def test_delete_menu_removes_items(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Resources", "dropdown")
    child = service.create_item(created["id"], "Blog", "page", "Blog", parent_id=parent.id)
    service.create_item(created["id"], "Whitepapers", "page", "Whitepapers", parent_id=child.id)

    response = client.delete(f"/api/menus/{created['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Menu deleted successfully (3 items removed)"
    session.expire_all()
    assert session.get(Menu, created["id"]) is None
    assert session.exec(select(MenuItem)).all() == []


def test_menu_tree_endpoint(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Company", "dropdown")
    service.create_item(created["id"], "Case Studies", "page", "Case Studies", parent_id=parent.id)
    service.create_item(created["id"], "Partners", "page", "Partners", parent_id=parent.id, is_active=False)

    response = client.get(f"/api/menus/{created['id']}/tree", headers=admin_headers)

    assert response.status_code == 200
    tree = response.json()
    assert len(tree) == 1
    assert tree[0]["label"] == "Company"
    assert [child["label"] for child in tree[0]["children"]] == ["Case Studies", "Partners"]
    assert tree[0]["children"][0]["href"] == "/case-studies"


def test_public_tree_hides_inactive_items(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Company", "dropdown")
    service.create_item(created["id"], "About", "page", "About", parent_id=parent.id)
    service.create_item(created["id"], "Partners", "page", "Partners", parent_id=parent.id, is_active=False)
    hidden = service.create_item(created["id"], "Legacy", "dropdown", is_active=False)
    service.create_item(created["id"], "Old Blog", "page", "Blog", parent_id=hidden.id)

    # no Authorization header
    response = client.get("/api/menus/location/header/tree")

    assert response.status_code == 200
    tree = response.json()
    assert [node["label"] for node in tree] == ["Company"]
    assert [child["label"] for child in tree[0]["children"]] == ["About"]


def test_public_tree_without_menu(client):
    response = client.get("/api/menus/location/footer/tree")

    assert response.status_code == 404


def test_public_tree_unknown_location(client):
    response = client.get("/api/menus/location/ceiling/tree")

    assert response.status_code == 422


def test_create_item_endpoint(client, admin_headers):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()

    response = client.post(
        f"/api/menus/{created['id']}/items",
        json={"label": "Contact", "link_type": "page", "target": "Contact"},
        headers=admin_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["menu_id"] == created["id"]
    assert data["parent_id"] is None
    assert data["sort_order"] == 0


def test_update_item_endpoint_moves_to_root(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Company", "dropdown")
    child = service.create_item(created["id"], "About", "page", "About", parent_id=parent.id)

    response = client.put(f"/api/menu-items/{child.id}", json={"parent_id": None}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["parent_id"] is None
    assert data["sort_order"] == 1


def test_update_item_endpoint_cycle(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Company", "dropdown")
    child = service.create_item(created["id"], "More", "dropdown", parent_id=parent.id)

    response = client.put(f"/api/menu-items/{parent.id}", json={"parent_id": child.id}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "CYCLE_DETECTED"


def test_reorder_endpoint(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    first = service.create_item(created["id"], "Products", "page", "Products")
    second = service.create_item(created["id"], "Solutions", "page", "Solutions")

    response = client.post(
        f"/api/menus/{created['id']}/reorder",
        json=[{"id": second.id, "parent_id": None, "order": 0}, {"id": first.id, "parent_id": None, "order": 1}],
        headers=admin_headers
    )

    assert response.status_code == 200
    assert [node["label"] for node in response.json()] == ["Solutions", "Products"]


def test_reorder_endpoint_rejects_cycle(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Company", "dropdown")
    child = service.create_item(created["id"], "More", "dropdown", parent_id=parent.id)

    response = client.post(
        f"/api/menus/{created['id']}/reorder",
        json=[{"id": parent.id, "parent_id": child.id, "order": 0}],
        headers=admin_headers
    )

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "REORDER_REJECTED"
    assert detail["cause"]["error"] == "CYCLE_DETECTED"


def test_delete_item_endpoint(client, admin_headers, session):
    created = client.post("/api/menus", json={"name": "Header"}, headers=admin_headers).json()
    service = MenuItemService(session)
    parent = service.create_item(created["id"], "Company", "dropdown")
    child = service.create_item(created["id"], "About", "page", "About", parent_id=parent.id)

    response = client.delete(f"/api/menu-items/{parent.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["deleted_ids"] == [parent.id, child.id]


def test_globals(client):
    response = client.get("/api/globals/")

    assert response.status_code == 200
    data = response.json()
    assert data["page_options"] == list(PAGE_IDENTIFIERS)
    assert data["link_types"] == ["page", "url", "dropdown"]
    assert data["menu_locations"] == ["header", "footer", "sidebar"]


def test_activity_feed(client, admin_headers, member_headers):
    client.post("/api/menus", json={"name": "Header"}, headers=admin_headers)
    client.post("/api/menus", json={"name": "Footer", "location": "footer"}, headers=admin_headers)

    response = client.get("/api/activity?limit=1", headers=admin_headers)

    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 1
    assert entries[0]["resource_title"] == "Footer"

    assert client.get("/api/activity", headers=member_headers).status_code == 403


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
