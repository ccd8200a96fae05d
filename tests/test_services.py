# tests/test_services.py
import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest

from toolroom.core.config import Settings
from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.data.machine_park import DEFAULT_MACHINES
from toolroom.data.menu import ADMIN_PANEL_KEYS, DEFAULT_MENU
from toolroom.models import CalculationType, CurrencyRate, MaterialPriceHistory, SavedCalculation
from toolroom.services import (
    currency_service,
    history_service,
    machine_service,
    material_service,
    menu_service,
    permission_service,
)
from toolroom.services.ai_gateway import AIGateway
from toolroom.services.export_service import CSV_BOM, CSV_HEADERS, format_key, history_csv


def _save(db, **overrides):
    data = {
        "calculation_type": CalculationType.cutting,
        "material": "Düşük Karbonlu Çelik",
        "tool": "Karbür",
        "parameters": {"diameter": 20},
        "results": {"spindleSpeed": 1989},
    }
    data.update(overrides)
    return history_service.save_calculation(db, **data)


class TestHistory:
    def test_list_is_newest_first(self, db):
        first = _save(db)
        second = _save(db, calculation_type=CalculationType.drilling)

        records = history_service.list_calculations(db)

        assert [r.id for r in records] == [second.id, first.id]

    def test_missing_labels_become_unknown(self, db):
        record = _save(db, material=None, tool="  ")
        assert record.material == "Bilinmiyor"
        assert record.tool == "Bilinmiyor"

    def test_dataclass_results_are_stored_as_plain_values(self, db):
        from toolroom.calculators.cost import CostInput, calculate_cost

        result = calculate_cost(CostInput(labor_rate=Decimal("600"), setup_time=Decimal("60"), quantity=1))
        record = _save(db, calculation_type=CalculationType.cost, results=result)
        assert record.results["labor_cost"] == 600.0

    def test_delete_touches_only_one_row(self, db):
        keep = _save(db)
        drop = _save(db)
        kept_created_at = keep.created_at

        history_service.delete_calculation(db, drop.id)

        remaining = history_service.list_calculations(db)
        assert [r.id for r in remaining] == [keep.id]
        assert remaining[0].created_at == kept_created_at

    def test_delete_missing_record_raises(self, db):
        with pytest.raises(NotFoundError):
            history_service.delete_calculation(db, 999)

    def test_limit_is_capped(self, db, monkeypatch):
        monkeypatch.setattr(history_service, "get_settings", lambda: Settings(SECRET_KEY="t", HISTORY_LIMIT=3))
        for _ in range(5):
            _save(db)
        assert len(history_service.list_calculations(db)) == 3
        assert len(history_service.list_calculations(db, limit=50)) == 3

    def test_clear_scoped_to_user(self, db, regular_user):
        _save(db, user_id=regular_user.id)
        _save(db)

        deleted = history_service.clear_calculations(db, user_id=regular_user.id)

        assert deleted == 1
        assert history_service.count_calculations(db) == 1

    def test_import_only_into_empty_store(self, db):
        records = [
            {"type": "cutting", "material": "Alüminyum", "tool": "Karbür", "parameters": {}, "results": {}, "timestamp": 1735689600000},
            {"type": "threading", "material": "Bronz", "tool": "Form Tap", "created_at": "2025-03-01T10:00:00Z"},
            {"type": "unknown-type"},
        ]

        assert history_service.import_calculations(db, records) == 2
        assert history_service.import_calculations(db, records) == 0

        stored = {r.calculation_type: r for r in db.query(SavedCalculation).all()}
        assert stored["cutting"].created_at == datetime(2025, 1, 1, 0, 0)
        assert stored["threading"].created_at == datetime(2025, 3, 1, 10, 0)

    def test_anonymous_history_excludes_owned_records(self, db, regular_user):
        owned = _save(db, user_id=regular_user.id)
        shared = _save(db)

        assert [r.id for r in history_service.list_calculations(db)] == [shared.id]
        assert history_service.count_calculations(db) == 1
        assert history_service.clear_calculations(db) == 1
        assert [r.id for r in history_service.list_calculations(db, user_id=regular_user.id)] == [owned.id]

    def test_import_ignores_owned_records_when_anonymous(self, db, regular_user):
        _save(db, user_id=regular_user.id)
        assert history_service.import_calculations(db, [{"type": "cost"}]) == 1

    @pytest.mark.parametrize("timestamp", [1e20, float("inf"), 10**30, "gecersiz"])
    def test_import_with_unusable_timestamp_uses_now(self, db, timestamp):
        before = datetime.now(timezone.utc).replace(tzinfo=None)

        assert history_service.import_calculations(db, [{"type": "cost", "timestamp": timestamp}]) == 1

        assert db.query(SavedCalculation).one().created_at >= before

    def test_import_converts_offsets_to_utc(self, db):
        history_service.import_calculations(db, [{"type": "cost", "created_at": "2025-03-01T13:00:00+03:00"}])
        assert db.query(SavedCalculation).one().created_at == datetime(2025, 3, 1, 10, 0)

    def test_csv_export_has_bom_header_and_one_row_per_record(self, db):
        _save(db)
        _save(db, notes="not")
        records = history_service.list_calculations(db)

        text = history_csv(records)

        assert text.startswith(CSV_BOM)
        lines = text[len(CSV_BOM):].strip("\n").split("\n")
        assert len(lines) == len(records) + 1
        assert lines[0] == ",".join(CSV_HEADERS)
        assert "Spindle speed: 1989" in lines[1]


class TestExportHelpers:
    @pytest.mark.parametrize(
        "key,label",
        [("spindleSpeed", "Spindle speed"), ("cost_per_part", "Cost / part"), ("mrr", "Mrr")],
    )
    def test_format_key(self, key, label):
        assert format_key(key) == label


class TestMenu:
    def test_empty_table_falls_back_to_default(self, db):
        categories, is_default = menu_service.load_menu(db)
        assert is_default is True
        assert [c["slug"] for c in categories] == [c["slug"] for c in DEFAULT_MENU]

    def test_save_replaces_layout_and_keeps_order(self, db):
        menu_service.save_menu(
            db,
            [
                {"slug": "b", "name": "İkinci", "modules": ["cost", "cost", "salary"]},
                {"slug": "a", "name": "Birinci", "modules": ["cutting"]},
            ],
        )
        categories, is_default = menu_service.load_menu(db)

        assert is_default is False
        assert [c["slug"] for c in categories] == ["b", "a"]
        assert categories[0]["modules"] == ["cost", "salary"]

    def test_reset_returns_to_default(self, db):
        menu_service.save_menu(db, [{"slug": "x", "name": "X", "modules": []}])
        menu_service.reset_menu(db)
        _, is_default = menu_service.load_menu(db)
        assert is_default is True


class TestPermissions:
    def test_defaults_without_rows(self, db, regular_user):
        assert permission_service.can_view(db, regular_user.id, "admin_machines") is True
        assert permission_service.can_edit(db, regular_user.id, "admin_machines") is False

    def test_effective_permissions_cover_every_panel(self, db, regular_user):
        perms = permission_service.effective_permissions(db, regular_user.id)
        assert [p["panel_key"] for p in perms] == list(ADMIN_PANEL_KEYS)
        assert all(p["can_view"] and not p["can_edit"] for p in perms)

    def test_upsert(self, db, regular_user):
        permission_service.set_permission(db, user_id=regular_user.id, panel_key="admin_menu", can_edit=True)
        permission_service.set_permission(db, user_id=regular_user.id, panel_key="admin_menu", can_view=False, can_edit=True)

        assert permission_service.can_view(db, regular_user.id, "admin_menu") is False
        # no edit without view
        assert permission_service.can_edit(db, regular_user.id, "admin_menu") is False

    def test_unknown_panel(self, db, regular_user):
        with pytest.raises(NotFoundError):
            permission_service.set_permission(db, user_id=regular_user.id, panel_key="admin_nope")


CUSTOM_FIELDS = {
    "name": "Özel Çelik",
    "category": "Çelik",
    "cutting_speed_min": 90,
    "cutting_speed_max": 130,
    "feed_rate_min": 0.1,
    "feed_rate_max": 0.3,
    "taylor_n": 0.22,
    "taylor_c": 380,
}


class TestMaterials:
    def test_custom_material_is_resolvable(self, db):
        row = material_service.create_custom_material(db, **CUSTOM_FIELDS)

        material = material_service.resolve_material(db, row.key)

        assert material.name == "Özel Çelik"
        assert material.custom is True
        assert row.key in [m.key for m in material_service.list_materials(db)]

    def test_duplicate_names_rejected(self, db):
        material_service.create_custom_material(db, **CUSTOM_FIELDS)
        with pytest.raises(DuplicateError):
            material_service.create_custom_material(db, **CUSTOM_FIELDS)
        with pytest.raises(DuplicateError):
            material_service.create_custom_material(db, **dict(CUSTOM_FIELDS, name="Pirinç"))

    def test_unknown_material(self, db):
        with pytest.raises(NotFoundError):
            material_service.resolve_material(db, "custom-999")

    def test_price_changes_are_audited(self, db, admin_user):
        material_service.update_price(db, material_key="steel-low", price=Decimal("45.50"), user=admin_user)
        material_service.update_price(db, material_key="steel-low", price=Decimal("45.50"), user=admin_user)
        material_service.update_price(db, material_key="steel-low", price=Decimal("48.00"), user=admin_user)
        material_service.update_afk_multiplier(db, material_key="steel-low", multiplier=Decimal("1.150"), user=admin_user)

        history = material_service.price_history(db, "steel-low")

        assert db.query(MaterialPriceHistory).count() == 3
        assert history[0].change_type == "afk_multiplier"
        price_rows = [h for h in history if h.change_type == "price"]
        assert price_rows[0].old_price == Decimal("45.50")
        assert price_rows[0].new_price == Decimal("48.00")
        assert price_rows[0].changed_by_name == "Yönetici"

    def test_afk_pricing_prefers_positive_stored_price(self, db):
        row = material_service.create_custom_material(db, **dict(CUSTOM_FIELDS, price_per_kg=Decimal("12")))

        _, price, multiplier = material_service.afk_pricing(db, row.key)
        assert (price, multiplier) == (Decimal("12"), Decimal("1"))

        material_service.update_price(db, material_key=row.key, price=Decimal("0"))
        material_service.update_afk_multiplier(db, material_key=row.key, multiplier=Decimal("1.2"))
        _, price, multiplier = material_service.afk_pricing(db, row.key)
        assert (price, multiplier) == (Decimal("12"), Decimal("1.2"))

        material_service.update_price(db, material_key=row.key, price=Decimal("20"))
        assert material_service.afk_pricing(db, row.key)[1] == Decimal("20")


class TestMachines:
    def test_seed_is_idempotent(self, db):
        assert machine_service.seed_default_machines(db) == len(DEFAULT_MACHINES)
        assert machine_service.seed_default_machines(db) == 0

    def test_grouped_by_type(self, db):
        machine_service.seed_default_machines(db)
        grouped = machine_service.machines_by_type(db)
        assert set(grouped) == {"turning", "milling-4axis", "milling-5axis"}
        assert all(m.type == "milling-5axis" for m in grouped["milling-5axis"])

    def test_deactivated_machines_are_hidden(self, db):
        machine_service.seed_default_machines(db)
        target = machine_service.list_machines(db)[0]

        machine_service.deactivate_machine(db, target.id)

        assert target.id not in [m.id for m in machine_service.list_machines(db)]
        assert target.id in [m.id for m in machine_service.list_machines(db, include_inactive=True)]

    def test_code_is_normalised_and_unique(self, db):
        fields = {
            "code": "t500",
            "type": "turning",
            "designation": "CNC Torna",
            "brand": "Test",
            "model": "X1",
            "year": 2024,
            "label": "T500 - Test X1",
        }
        machine = machine_service.create_machine(db, **fields)
        assert machine.code == "T500"
        with pytest.raises(DuplicateError):
            machine_service.create_machine(db, **dict(fields, code="T500"))


def _historical(db, year=2025):
    for month, (usd, eur, gold) in enumerate([(35.0, 37.0, 3000), (36.0, 38.0, 3100)], start=11):
        for rate_type, value in (("usd", usd), ("eur", eur), ("gold", gold)):
            db.add(CurrencyRate(year=year, month=month, rate_type=rate_type, value=value, is_forecast=False))
    db.commit()


class TestCurrency:
    def test_linear_extrapolation(self):
        assert currency_service.linear_extrapolation([10.0, 12.0], months=3) == [14.0, 16.0, 18.0]
        assert currency_service.linear_extrapolation([], months=2) == [0.0, 0.0]

    def test_upsert_rejects_bad_month(self, db):
        with pytest.raises(ValueError):
            currency_service.upsert_rate(db, year=2025, month=13, rate_type="usd", value=1.0)

    def test_fallback_without_api_key(self, db):
        _historical(db)
        gateway = AIGateway(settings=Settings(SECRET_KEY="t"))

        result = asyncio.run(currency_service.update_forecasts(db, gateway))

        assert result == {"success": True, "year": 2026, "updated": 36, "source": "linear_extrapolation"}
        usd = currency_service.monthly_table(db, 2026, True)
        assert usd[0]["usd"] == 37.0
        assert usd[0]["gold"] == 3200
        assert usd[11]["usd"] == 48.0

    def test_fallback_when_ai_answer_is_incomplete(self, db):
        _historical(db)
        answer = {"usd": [40.0] * 12, "eur": [42.0] * 12, "gold": [3500] * 3}
        gateway = AIGateway(
            settings=Settings(SECRET_KEY="t", AI_GATEWAY_API_KEY="k"),
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(answer)}}]})
            ),
        )

        result = asyncio.run(currency_service.update_forecasts(db, gateway))

        assert result["source"] == "linear_extrapolation"

    def test_ai_forecast_replaces_existing(self, db):
        _historical(db)
        answer = {"usd": [40.0] * 12, "eur": [42.0] * 12, "gold": [3500] * 12}
        gateway = AIGateway(
            settings=Settings(SECRET_KEY="t", AI_GATEWAY_API_KEY="k"),
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    200, json={"choices": [{"message": {"content": "```json\n" + json.dumps(answer) + "\n```"}}]}
                )
            ),
        )

        asyncio.run(currency_service.update_forecasts(db, AIGateway(settings=Settings(SECRET_KEY="t"))))
        result = asyncio.run(currency_service.update_forecasts(db, gateway))

        assert result["source"] == "ai_forecast"
        rows = currency_service.list_rates(db, year=2026, is_forecast=True)
        assert len(rows) == 36
        assert {r.source for r in rows} == {"ai_forecast"}

    def test_gateway_error_falls_back(self, db):
        _historical(db)
        gateway = AIGateway(
            settings=Settings(SECRET_KEY="t", AI_GATEWAY_API_KEY="k"),
            transport=httpx.MockTransport(lambda request: httpx.Response(429)),
        )
        result = asyncio.run(currency_service.update_forecasts(db, gateway))
        assert result["source"] == "linear_extrapolation"

    @pytest.mark.parametrize(
        "body",
        [
            {"text": "<html>proxy error</html>"},
            {"json": {"choices": ["metin"]}},
            {"json": ["beklenmeyen"]},
        ],
    )
    def test_malformed_ai_body_falls_back(self, db, body):
        _historical(db)
        gateway = AIGateway(
            settings=Settings(SECRET_KEY="t", AI_GATEWAY_API_KEY="k"),
            transport=httpx.MockTransport(lambda request: httpx.Response(200, **body)),
        )

        result = asyncio.run(currency_service.update_forecasts(db, gateway))

        assert result["source"] == "linear_extrapolation"
        assert len(currency_service.list_rates(db, year=2026, is_forecast=True)) == 36

    def test_summary(self, db):
        _historical(db)
        asyncio.run(currency_service.update_forecasts(db, AIGateway(settings=Settings(SECRET_KEY="t"))))

        data = currency_service.summary(db)

        assert data["historical_year"] == 2025
        assert data["forecast_year"] == 2026
        assert data["averages"]["usd"] == 35.5
        # 36 -> 48
        assert data["changes"]["usd"] == 33.3
