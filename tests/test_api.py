# tests/test_api.py
from decimal import Decimal

from toolroom.data.machine_park import DEFAULT_MACHINES
from toolroom.data.menu import ADMIN_PANEL_KEYS
from toolroom.models import AdminPanelPermission, SavedCalculation, UserRole
from toolroom.services import history_service, material_service
from toolroom.services.auth import create_user
from toolroom.services.permission_service import set_permission

CUTTING_BODY = {"material": "steel-low", "tool": "carbide", "operation": "turning", "diameter": 20, "depth": 2}


def test_health(client):
    assert client.get("/healthz").json()["status"] == "ok"
    assert client.get("/api/health").json()["status"] == "ok"


class TestAuth:
    def test_login_and_me(self, admin_client):
        data = admin_client.get("/api/auth/me").json()
        assert data["username"] == "admin"
        assert data["role"] == "admin"
        assert len(data["permissions"]) == len(ADMIN_PANEL_KEYS)

    def test_bad_password(self, client, regular_user):
        response = client.post("/api/auth/login", json={"username": "operator", "password": "wrong"})
        assert response.status_code == 400

    def test_me_requires_session(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_logout(self, user_client):
        user_client.post("/api/auth/logout")
        assert user_client.get("/api/auth/me").status_code == 401


class TestReference:
    def test_tables(self, client):
        assert len(client.get("/api/reference/tool-types").json()) == 6
        assert client.get("/api/reference/threads/metric-coarse").json()[0]["designation"] == "M3"
        assert client.get("/api/reference/threads/bsp").status_code == 404
        assert client.get("/api/reference/payroll/2025").json()["income_tax_brackets"][-1]["limit"] is None
        assert client.get("/api/reference/payroll/1990").status_code == 404

    def test_tolerance_tables(self, client):
        data = client.get("/api/reference/tolerance").json()
        assert data["it_table"][4]["range"] == "18-30"
        assert data["it_table"][4]["IT7"] == 21
        assert data["fits"][0]["code"] == "H7/h6"
        assert len(data["surface_roughness"]) == 11


class TestCalculators:
    def test_cutting_without_save(self, client):
        response = client.post("/api/calculators/cutting", json=CUTTING_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["record_id"] is None
        assert body["result"]["spindle_speed"] == 1989
        assert client.get("/api/history/").json() == []

    def test_cutting_with_save_creates_history(self, client):
        response = client.post("/api/calculators/cutting?save=true", json=dict(CUTTING_BODY, notes="ilk deneme"))

        record_id = response.json()["record_id"]
        record = client.get(f"/api/history/{record_id}").json()
        assert record["calculation_type"] == "cutting"
        assert record["type_label"] == "Kesme Hesaplama"
        assert record["material"] == "Düşük Karbonlu Çelik"
        assert record["tool"] == "Karbür"
        assert record["parameters"]["operation"] == "Tornalama"
        assert record["notes"] == "ilk deneme"

    def test_garbage_numbers_are_zero(self, client):
        response = client.post("/api/calculators/cutting", json=dict(CUTTING_BODY, diameter="abc", depth=None))
        assert response.status_code == 200
        assert response.json()["result"]["spindle_speed"] == 0

    def test_huge_numbers_do_not_fail(self, client):
        response = client.post("/api/calculators/cutting", json=dict(CUTTING_BODY, diameter=1, depth=1e308))
        assert response.status_code == 200
        assert response.json()["result"]["mrr"] == 0

        cost = client.post("/api/calculators/cost", json={"labor_rate": "1e30", "setup_time": 60, "quantity": 1})
        assert cost.status_code == 200
        assert cost.json()["result"]["grand_total"] == 1e30

    def test_tolerance(self, client):
        result = client.post("/api/calculators/tolerance", json={"nominal_size": "25", "grade": "IT7"}).json()
        assert result["tolerance"] == 21
        assert result["hole_max"] == 25.021

        assert client.post("/api/calculators/tolerance", json={"nominal_size": "abc"}).status_code == 400
        assert client.post("/api/calculators/tolerance", json={"nominal_size": 25, "grade": "IT20"}).status_code == 404

    def test_afk_price_uses_stored_settings(self, client, db):
        material_service.update_price(db, material_key="aluminum", price=Decimal("10"))
        material_service.update_afk_multiplier(db, material_key="aluminum", multiplier=Decimal("1.5"))
        body = {
            "material": "aluminum",
            "gross_weight": 2.5,
            "net_weight": 1.2,
            "has_holes": True,
            "small_holes": 4,
            "large_holes": 2,
            "quantity": 10,
        }

        data = client.post("/api/calculators/afk-price", json=body).json()
        assert data["price_per_kg"] == 10
        assert data["afk_multiplier"] == 1.5
        assert data["result"]["unit_total"] == 33.0
        assert data["result"]["grand_total"] == 330.0
        assert data["result"]["chip_volume"] == 481.48

        pdf = client.post("/api/calculators/afk-price/quote.pdf", json=body)
        assert pdf.content.startswith(b"%PDF")
        assert client.post("/api/calculators/afk-price", json=dict(body, material="wood")).status_code == 404

    def test_unknown_material_is_404(self, client):
        response = client.post("/api/calculators/cutting", json=dict(CUTTING_BODY, material="wood"))
        assert response.status_code == 404

    def test_tool_life_and_compare(self, client):
        body = {"material": "steel-low", "cutting_speed": 150, "workpiece_length": 100, "parts_per_day": 200}
        assert client.post("/api/calculators/tool-life", json=body).json()["result"]["tool_life_minutes"] > 0

        rows = client.post("/api/calculators/tool-life/compare", json={"material": "steel-low", "cutting_speed": 150}).json()
        assert [r["tool_key"] for r in rows][0] == "hss"

    def test_threading_unknown_designation(self, client):
        body = {"standard": "metric-coarse", "designation": "M99", "material_category": "Alüminyum"}
        assert client.post("/api/calculators/threading", json=body).status_code == 404

    def test_reaming_saved_under_drilling(self, client):
        response = client.post("/api/calculators/reaming?save=true", json={"material": "steel-low", "final_diameter": 10})
        assert response.json()["result"]["pre_drill_size"] == 9.5
        record = client.get(f"/api/history/{response.json()['record_id']}").json()
        assert record["calculation_type"] == "drilling"
        assert record["parameters"]["mode"] == "ream"

    def test_grinding(self, client):
        body = {"operation": "surface", "wheel": "aluminum-oxide", "material_category": "Çelik (Yumuşak)"}
        assert client.post("/api/calculators/grinding", json=body).json()["result"]["wheel_rpm"] == 1910

    def test_cost_and_quote_pdf(self, client):
        body = {"labor_rate": "600", "turning_rate": 10, "setup_time": 60, "machining_time": 5, "quantity": 10, "reference_no": "Q-1"}
        result = client.post("/api/calculators/cost", json=body).json()["result"]
        assert result["grand_total"] == 1600.0

        pdf = client.post("/api/calculators/cost/quote.pdf", json=body)
        assert pdf.headers["content-type"] == "application/pdf"
        assert pdf.content.startswith(b"%PDF")

    def test_salary(self, client):
        result = client.post("/api/calculators/salary/gross-to-net", json={"amount": "22104.67"}).json()
        assert result["net_salary"] == 18788.97

        annual = client.post("/api/calculators/salary/annual", json={"amount": 50000}).json()
        assert len(annual["months"]) == 12
        assert annual["total_gross"] == 600000.0


class TestHistoryApi:
    def test_user_sees_only_own_records(self, client, user_client):
        # anonymous record is not visible once signed in
        user_client.post("/api/auth/logout")
        user_client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY)
        user_client.post("/api/auth/login", json={"username": "operator", "password": "user-pass-123"})

        assert user_client.get("/api/history/").json() == []
        own = user_client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY).json()["record_id"]
        assert [r["id"] for r in user_client.get("/api/history/").json()] == [own]

    def test_delete(self, client):
        first = client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY).json()["record_id"]
        second = client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY).json()["record_id"]

        assert client.delete(f"/api/history/{first}").status_code == 204
        assert client.delete(f"/api/history/{first}").status_code == 404
        assert [r["id"] for r in client.get("/api/history/").json()] == [second]

    def test_exports(self, client):
        client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY)
        record_id = client.get("/api/history/").json()[0]["id"]

        csv_response = client.get("/api/history/export.csv")
        assert csv_response.headers["content-type"].startswith("text/csv")
        assert csv_response.content.startswith("\ufeff".encode("utf-8"))
        assert len(csv_response.text.strip().splitlines()) == 2

        assert client.get("/api/history/export.pdf").content.startswith(b"%PDF")
        assert client.get(f"/api/history/{record_id}/pdf").content.startswith(b"%PDF")

    def test_import_and_clear(self, client):
        records = [{"type": "cost", "material": "Alüminyum", "results": {"grandTotal": 10}, "timestamp": 1735689600000}]
        assert client.post("/api/history/import", json={"records": records}).json() == {"imported": 1}
        assert client.post("/api/history/import", json={"records": records}).json() == {"imported": 0}
        assert client.delete("/api/history/").json() == {"deleted": 1}

    def test_anonymous_requests_cannot_reach_owned_records(self, client, user_client):
        own = user_client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY).json()["record_id"]
        user_client.post("/api/auth/logout")

        assert user_client.get("/api/history/").json() == []
        assert user_client.get("/api/dashboard/").json()["counts"]["calculations"] == 0
        assert user_client.get(f"/api/history/{own}/pdf").status_code == 404
        assert user_client.delete(f"/api/history/{own}").status_code == 404
        assert user_client.delete("/api/history/").json() == {"deleted": 0}

        user_client.post("/api/auth/login", json={"username": "operator", "password": "user-pass-123"})
        assert [r["id"] for r in user_client.get("/api/history/").json()] == [own]

    def test_import_with_out_of_range_timestamp(self, client):
        records = [{"type": "cost", "timestamp": 1e20}]
        assert client.post("/api/history/import", json={"records": records}).json() == {"imported": 1}


class TestMaterialsApi:
    def test_list_contains_reference_materials(self, client):
        keys = [m["key"] for m in client.get("/api/materials/").json()]
        assert "steel-low" in keys
        assert len(keys) == 10

    def test_custom_material_crud(self, user_client):
        body = {
            "name": "Özel Alaşım",
            "category": "Çelik",
            "cutting_speed_min": 80,
            "cutting_speed_max": 120,
            "feed_rate_min": 0.1,
            "feed_rate_max": 0.2,
        }
        created = user_client.post("/api/materials/custom", json=body)
        assert created.status_code == 201
        key = created.json()["key"]

        assert user_client.post("/api/materials/custom", json=body).status_code == 400
        response = user_client.post("/api/calculators/cutting", json=dict(CUTTING_BODY, material=key))
        assert response.json()["result"]["cutting_speed"] == 100

        material_id = created.json()["id"]
        assert user_client.delete(f"/api/materials/custom/{material_id}").status_code == 204
        assert user_client.get(f"/api/materials/{key}").status_code == 404

    def test_price_update_requires_admin(self, user_client):
        assert user_client.put("/api/materials/steel-low/price", json={"price_per_kg": "50"}).status_code == 403

    def test_price_update_and_history(self, admin_client):
        assert admin_client.put("/api/materials/steel-low/price", json={"price_per_kg": "50"}).status_code == 200
        assert admin_client.put("/api/materials/steel-low/afk", json={"afk_multiplier": "1.2"}).status_code == 200
        assert admin_client.put("/api/materials/unknown/price", json={"price_per_kg": "50"}).status_code == 404

        history = admin_client.get("/api/materials/steel-low/price-history").json()
        assert [h["change_type"] for h in history] == ["afk_multiplier", "price"]


class TestMachinesApi:
    def test_seed_requires_edit_permission(self, client, db):
        create_user(db, username="viewer", password="viewer-pass", role=UserRole.admin)
        client.post("/api/auth/login", json={"username": "viewer", "password": "viewer-pass"})

        assert client.post("/api/machines/seed").status_code == 403

    def test_seed_list_and_deactivate(self, admin_client):
        assert admin_client.post("/api/machines/seed").json() == {"created": len(DEFAULT_MACHINES)}

        machines = admin_client.get("/api/machines/").json()
        assert len(machines) == len(DEFAULT_MACHINES)
        turning = admin_client.get("/api/machines/?type=turning").json()
        assert all(m["type"] == "turning" for m in turning)

        target = machines[0]["id"]
        assert admin_client.post(f"/api/machines/{target}/deactivate").json()["is_active"] is False
        assert len(admin_client.get("/api/machines/").json()) == len(DEFAULT_MACHINES) - 1

    def test_create_duplicate_code(self, admin_client):
        body = {
            "code": "T900",
            "type": "milling-5axis",
            "designation": "5 Eksen",
            "brand": "Test",
            "model": "M",
            "year": 2024,
            "label": "T900",
            "minute_rate": "12.50",
        }
        assert admin_client.post("/api/machines/", json=body).status_code == 201
        assert admin_client.post("/api/machines/", json=body).status_code == 400


class TestMenuApi:
    def test_default_then_saved(self, admin_client):
        assert admin_client.get("/api/menu/").json()["is_default"] is True

        layout = [{"slug": "hesap", "name": "Hesaplamalar", "modules": ["cutting", "cost"]}]
        saved = admin_client.put("/api/menu/", json=layout).json()
        assert saved["is_default"] is False
        assert saved["categories"][0]["modules"] == ["cutting", "cost"]

        assert admin_client.post("/api/menu/reset").json()["is_default"] is True

    def test_duplicate_slugs_rejected(self, admin_client):
        layout = [{"slug": "a", "name": "A"}, {"slug": "a", "name": "B"}]
        assert admin_client.put("/api/menu/", json=layout).status_code == 400

    def test_save_requires_login(self, client):
        assert client.put("/api/menu/", json=[]).status_code == 401


class TestPermissionsApi:
    def test_grant_and_read(self, admin_client, regular_user):
        url = f"/api/admin/users/{regular_user.id}/permissions"
        defaults = admin_client.get(url).json()
        assert all(p["can_view"] and not p["can_edit"] for p in defaults)

        updated = admin_client.put(f"{url}/admin_machines", json={"can_view": True, "can_edit": True}).json()
        machines = next(p for p in updated if p["panel_key"] == "admin_machines")
        assert machines["can_edit"] is True

        assert admin_client.put(f"{url}/admin_unknown", json={}).status_code == 404

    def test_create_user(self, admin_client):
        body = {"username": "yeni", "password": "parola123"}
        assert admin_client.post("/api/admin/users", json=body).status_code == 201
        assert admin_client.post("/api/admin/users", json=body).status_code == 400

    def test_update_user(self, admin_client, admin_user, regular_user):
        url = f"/api/admin/users/{regular_user.id}"

        response = admin_client.patch(url, json={"display_name": "Usta", "role": "admin"})
        assert response.status_code == 200
        assert response.json()["display_name"] == "Usta"
        assert response.json()["role"] == "admin"
        assert response.json()["username"] == "operator"

        assert admin_client.patch(url, json={"username": "admin"}).status_code == 400
        assert admin_client.patch("/api/admin/users/999", json={}).status_code == 404
        assert admin_client.patch(f"/api/admin/users/{admin_user.id}", json={"role": "user"}).status_code == 400

    def test_change_password(self, admin_client, regular_user):
        url = f"/api/admin/users/{regular_user.id}/password"
        assert admin_client.put(url, json={"new_password": "kisa"}).status_code == 422
        assert admin_client.put(url, json={"new_password": "yeni-parola"}).status_code == 204

        old = admin_client.post("/api/auth/login", json={"username": "operator", "password": "user-pass-123"})
        assert old.status_code == 400
        new = admin_client.post("/api/auth/login", json={"username": "operator", "password": "yeni-parola"})
        assert new.status_code == 200

    def test_delete_user_removes_owned_rows(self, admin_client, admin_user, regular_user, db):
        user_id = regular_user.id
        history_service.save_calculation(db, calculation_type="cutting", parameters={}, results={}, user_id=user_id)
        set_permission(db, user_id=user_id, panel_key="admin_machines", can_view=True, can_edit=True)

        assert admin_client.delete(f"/api/admin/users/{user_id}").status_code == 204
        assert admin_client.delete(f"/api/admin/users/{user_id}").status_code == 404
        assert admin_client.delete(f"/api/admin/users/{admin_user.id}").status_code == 400

        assert [u["username"] for u in admin_client.get("/api/admin/users").json()] == ["admin"]
        assert db.query(SavedCalculation).filter(SavedCalculation.user_id == user_id).count() == 0
        assert db.query(AdminPanelPermission).filter(AdminPanelPermission.user_id == user_id).count() == 0


class TestCurrencyApi:
    def test_rates_table_and_export(self, admin_client):
        for month, value in ((1, 35.2), (2, 35.9)):
            response = admin_client.put(
                "/api/currency/rates", json={"year": 2025, "month": month, "rate_type": "usd", "value": value}
            )
            assert response.status_code == 200
        assert admin_client.put(
            "/api/currency/rates", json={"year": 2025, "month": 13, "rate_type": "usd", "value": 1}
        ).status_code == 400

        table = admin_client.get("/api/currency/table/2025").json()
        assert [row["usd"] for row in table] == [35.2, 35.9]

        xlsx = admin_client.get("/api/currency/table/2025/export.xlsx")
        assert xlsx.status_code == 200
        assert xlsx.content.startswith(b"PK")
        assert admin_client.get("/api/currency/table/2030/export.xlsx").status_code == 404

    def test_forecast_function_uses_fallback(self, admin_client):
        admin_client.put("/api/currency/rates", json={"year": 2025, "month": 12, "rate_type": "usd", "value": 36})
        result = admin_client.post("/functions/v1/update-currency-forecasts").json()
        assert result["source"] == "linear_extrapolation"
        assert result["year"] == 2026
        assert admin_client.get("/api/currency/summary").json()["forecast_year"] == 2026


class TestDashboard:
    def test_counts_and_recent(self, client):
        for _ in range(7):
            client.post("/api/calculators/cutting?save=true", json=CUTTING_BODY)

        data = client.get("/api/dashboard/").json()

        assert data["counts"]["calculations"] == 7
        assert data["counts"]["machines"] == 0
        assert len(data["recent_calculations"]) == 5
        assert data["menu"]["is_default"] is True
