"""
API tests for the admin console: the login gate, role-filtered sections, and
the admin-only menu, inventory, settings and user endpoints.
"""
import pytest

from casa_nala import config
from casa_nala.enums import Role
from casa_nala.models import AuthSession


# =============================================================================
# Cookie gate
# =============================================================================

class TestAdminGate:

    @pytest.mark.parametrize("path", [
        "/admin",
        "/admin/kitchen",
        "/admin/orders",
        "/api/v1/admin/menu",
    ])
    def test_no_cookie_redirects_to_login(self, client, path):
        resp = client.get(path, follow_redirects=False)

        assert resp.status_code == 302
        assert resp.headers["location"] == "/login?redirectedFrom=" + path.replace("/", "%2F")

    def test_redirect_lands_on_login_prompt(self, client):
        resp = client.get("/admin/kitchen")

        assert resp.status_code == 200
        assert resp.json()["redirected_from"] == "/admin/kitchen"

    def test_public_paths_are_not_gated(self, client):
        assert client.get("/menu").status_code == 200
        assert client.get("/administracion", follow_redirects=False).status_code == 404

    def test_stale_cookie_is_denied_with_login_link(self, client, login_as, db_session):
        login_as(Role.ADMIN)
        db_session.query(AuthSession).delete()
        db_session.commit()

        resp = client.get("/admin/kitchen", follow_redirects=False)

        assert resp.status_code == 403
        assert resp.json() == {
            "detail": "Acceso denegado. No tienes permiso para ver esta página.",
            "outcome": "denied",
            "links": {"home": "/", "login": "/login"},
        }

    def test_wrong_role_is_denied_with_home_link_only(self, client, login_as):
        login_as(Role.COCINA)

        resp = client.get("/admin/menu")

        assert resp.status_code == 403
        assert resp.json()["links"] == {"home": "/"}


# =============================================================================
# Console index
# =============================================================================

class TestAdminConsole:

    def _paths(self, client):
        resp = client.get("/admin")
        assert resp.status_code == 200
        return [s["path"] for s in resp.json()["sections"]]

    def test_admin_sees_every_section(self, client, login_as):
        login_as(Role.ADMIN)
        assert self._paths(client) == [s["path"] for s in config.ADMIN_SECTIONS]

    def test_cocina_sees_kitchen_only(self, client, login_as):
        login_as(Role.COCINA)
        assert self._paths(client) == ["/admin/kitchen"]

    def test_mesero_sees_floor_sections(self, client, login_as):
        login_as(Role.MESERO)
        assert self._paths(client) == ["/admin/delivery", "/admin/pickup", "/mesero/orders"]

    def test_cliente_is_denied(self, client, login_as):
        login_as(Role.CLIENTE)
        resp = client.get("/admin")
        assert resp.status_code == 403
        assert resp.json()["links"] == {"home": "/"}


# =============================================================================
# Users
# =============================================================================

class TestUsers:

    def test_create_user_and_log_in(self, client, login_as):
        login_as(Role.ADMIN)

        resp = client.post("/admin/users", json={
            "email": "Nuevo.Cocinero@CasaNala.mx",
            "password": "tortillas-1234",
            "role": "cocina",
        })

        assert resp.status_code == 201
        assert resp.json()["email"] == "nuevo.cocinero@casanala.mx"
        assert resp.json()["role"] == "cocina"

        client.cookies.clear()
        login = client.post("/login", json={"email": "nuevo.cocinero@casanala.mx", "password": "tortillas-1234"})
        assert login.status_code == 200
        assert login.json()["role"] == "cocina"

    def test_duplicate_email_is_409(self, client, login_as):
        login_as(Role.ADMIN)
        payload = {"email": "cajera@casanala.mx", "password": "12345678"}
        assert client.post("/admin/users", json=payload).status_code == 201
        assert client.post("/admin/users", json=payload).status_code == 409

    def test_invalid_email_is_422(self, client, login_as):
        login_as(Role.ADMIN)
        resp = client.post("/admin/users", json={"email": "no-es-correo", "password": "12345678"})
        assert resp.status_code == 422

    def test_short_password_is_422(self, client, login_as):
        login_as(Role.ADMIN)
        resp = client.post("/admin/users", json={"email": "x@casanala.mx", "password": "corta"})
        assert resp.status_code == 422

    def test_change_role_takes_effect_on_next_request(self, client, login_as):
        login_as(Role.ADMIN)
        users = {u["email"]: u for u in client.get("/admin/users").json()}
        mesero_id = users["mesero@casanala.test"]["id"]

        resp = client.put(f"/admin/users/{mesero_id}/role", json={"role": "cocina"})
        assert resp.status_code == 200

        login_as(Role.MESERO)
        assert client.get("/admin/kitchen").status_code == 200
        assert client.get("/admin/delivery").status_code == 403

    def test_change_role_missing_user(self, client, login_as):
        login_as(Role.ADMIN)
        assert client.put("/admin/users/nope/role", json={"role": "admin"}).status_code == 404

    def test_list_users_sorted_by_email(self, client, login_as):
        login_as(Role.ADMIN)
        emails = [u["email"] for u in client.get("/admin/users").json()]
        assert emails == sorted(emails)
        assert len(emails) == 4

    def test_mesero_cannot_manage_users(self, client, login_as):
        login_as(Role.MESERO)
        assert client.get("/admin/users").status_code == 403


# =============================================================================
# Menu
# =============================================================================

class TestAdminMenu:

    def test_create_update_delete(self, client, login_as):
        login_as(Role.ADMIN)

        created = client.post("/admin/menu", json={
            "name": "Enchiladas Suizas",
            "description": "Enchiladas de pollo en salsa verde cremosa.",
            "price": 135,
            "category": "Platos Fuertes",
            "imageUrl": "https://img.casanala.test/enchiladas.jpg",
        })
        assert created.status_code == 201
        item_id = created.json()["id"]
        assert created.json()["image_url"] == "https://img.casanala.test/enchiladas.jpg"

        updated = client.put(f"/admin/menu/{item_id}", json={"price": 140})
        assert updated.status_code == 200
        assert updated.json()["price"] == 140
        assert updated.json()["name"] == "Enchiladas Suizas"

        assert client.delete(f"/admin/menu/{item_id}").status_code == 204
        assert client.get(f"/admin/menu/{item_id}").status_code == 404

    @pytest.mark.parametrize("payload", [
        {"name": "Ta", "price": 10, "category": "Tacos"},
        {"name": "Taco", "price": 0, "category": "Tacos"},
        {"name": "Taco", "price": 10, "category": ""},
        {"name": "Taco", "price": 10, "category": "Tacos", "imageUrl": "no es url"},
        {"name": "Taco", "price": 10, "category": "Tacos", "imageUrl": "ftp://img.casanala.mx/taco.jpg"},
        {"name": "Taco", "price": 10, "category": "Tacos", "imageUrl": "https://"},
    ])
    def test_invalid_item_is_422(self, client, login_as, payload):
        login_as(Role.ADMIN)
        assert client.post("/admin/menu", json=payload).status_code == 422

    def test_blank_image_url_means_no_image(self, client, login_as):
        login_as(Role.ADMIN)

        created = client.post("/admin/menu", json={
            "name": "Elote Asado", "price": 35, "category": "Antojitos", "imageUrl": "  ",
        })

        assert created.status_code == 201
        assert created.json()["image_url"] is None

    def test_public_menu_reflects_changes(self, client, login_as):
        login_as(Role.ADMIN)
        client.delete("/admin/menu/6")

        client.cookies.clear()
        names = [m["name"] for m in client.get("/menu").json()]

        assert "Agua Fresca de Jamaica" not in names
        assert len(names) == 5


# =============================================================================
# Inventory
# =============================================================================

class TestAdminInventory:

    def test_add_and_flag_low_stock(self, client, login_as):
        login_as(Role.ADMIN)

        resp = client.post("/admin/inventory", json={
            "name": "Chile guajillo", "unit": "kg", "stock": 1.5, "lowStockThreshold": 2,
        })
        assert resp.status_code == 201
        item = resp.json()
        assert item["is_low_stock"] is True

        resp = client.patch(f"/admin/inventory/{item['id']}/stock", json={"stock": 8})
        assert resp.status_code == 200
        assert resp.json()["stock"] == 8
        assert resp.json()["is_low_stock"] is False

    def test_no_threshold_is_never_low(self, client, login_as):
        login_as(Role.ADMIN)
        resp = client.post("/admin/inventory", json={"name": "Sal", "unit": "kg", "stock": 0})
        assert resp.json()["is_low_stock"] is False

    def test_list_sorted_by_name(self, client, login_as):
        login_as(Role.ADMIN)
        for name in ("Tomate", "Aguacate", "Cebolla"):
            client.post("/admin/inventory", json={"name": name, "unit": "kg", "stock": 5})

        names = [i["name"] for i in client.get("/admin/inventory").json()]

        assert names == ["Aguacate", "Cebolla", "Tomate"]

    def test_negative_stock_is_422(self, client, login_as):
        login_as(Role.ADMIN)
        resp = client.post("/admin/inventory", json={"name": "Sal", "unit": "kg", "stock": -1})
        assert resp.status_code == 422

    def test_orders_do_not_change_stock(self, client, login_as, order_payload):
        login_as(Role.ADMIN)
        item_id = client.post("/admin/inventory", json={"name": "Maíz", "unit": "kg", "stock": 10}).json()["id"]

        client.post("/orders", json=order_payload())

        stock = {i["id"]: i["stock"] for i in client.get("/admin/inventory").json()}
        assert stock[item_id] == 10

    def test_delete_and_missing(self, client, login_as):
        login_as(Role.ADMIN)
        item_id = client.post("/admin/inventory", json={"name": "Sal", "unit": "kg", "stock": 1}).json()["id"]

        assert client.delete(f"/admin/inventory/{item_id}").status_code == 204
        assert client.delete(f"/admin/inventory/{item_id}").status_code == 404
        assert client.patch(f"/admin/inventory/{item_id}/stock", json={"stock": 1}).status_code == 404


# =============================================================================
# Settings
# =============================================================================

def _hours(**overrides):
    hours = {
        day: {"isOpen": True, "open": "09:00", "close": "21:00"}
        for day in ("lunes", "martes", "miercoles", "jueves", "viernes", "sabado", "domingo")
    }
    hours.update(overrides)
    return hours


class TestAdminSettings:

    def test_defaults_before_first_save(self, client, login_as):
        login_as(Role.ADMIN)

        data = client.get("/admin/settings").json()

        assert data["weekly_hours"]["lunes"]["is_open"] is False
        assert data["weekly_hours"]["sabado"] == {"is_open": True, "open": "10:00", "close": "22:00"}
        assert data["promotions"] == []
        assert data["last_updated"] is None

    def test_save_and_public_shows_only_active_promotions(self, client, login_as):
        login_as(Role.ADMIN)

        resp = client.put("/admin/settings", json={
            "weeklyHours": _hours(lunes={"isOpen": False}),
            "promotions": [
                {"id": "2x1", "description": "2x1 en tacos los martes", "isActive": True},
                {"id": "navidad", "description": "Ponche gratis en diciembre", "isActive": False},
            ],
        })
        assert resp.status_code == 200
        assert len(resp.json()["promotions"]) == 2
        assert resp.json()["last_updated"] is not None

        client.cookies.clear()
        public = client.get("/settings").json()
        assert [p["id"] for p in public["promotions"]] == ["2x1"]
        assert public["weekly_hours"]["lunes"]["is_open"] is False
        assert public["weekly_hours"]["martes"]["close"] == "21:00"

    @pytest.mark.parametrize("day", [
        {"isOpen": True, "open": "09:00"},
        {"isOpen": True, "open": "9am", "close": "21:00"},
        {"isOpen": False, "open": "25:00", "close": "21:00"},
    ])
    def test_invalid_hours_are_422(self, client, login_as, day):
        login_as(Role.ADMIN)
        resp = client.put("/admin/settings", json={"weeklyHours": _hours(viernes=day), "promotions": []})
        assert resp.status_code == 422

    def test_short_promotion_description_is_422(self, client, login_as):
        login_as(Role.ADMIN)
        resp = client.put("/admin/settings", json={
            "weeklyHours": _hours(),
            "promotions": [{"id": "x", "description": "2x1", "isActive": True}],
        })
        assert resp.status_code == 422
