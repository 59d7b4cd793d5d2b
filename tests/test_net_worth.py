from decimal import Decimal

import pytest

from database import crud
from database.models import NetWorthModel
from models.holding import AssetCreate, LiabilityCreate
from models.net_worth import NetWorth
from services.exceptions import InvalidPeriodError, RecordNotFoundError
from services.holding_service import asset_service, liability_service
from services.net_worth_service import NetWorthService


def _rows(db):
    return db.query(NetWorthModel).all()


def test_missing_month_returns_none(db):
    assert NetWorthService().get_net_worth(db, 2024, 1) is None


def test_upsert_is_idempotent(db):
    service = NetWorthService()

    first = service.save_or_update_net_worth(db, 2024, 5, Decimal("1000.00"), Decimal("200.00"))
    second = service.save_or_update_net_worth(db, 2024, 5, Decimal("1000.00"), Decimal("200.00"))

    assert first.id == second.id
    [row] = _rows(db)
    assert (row.year, row.month) == (2024, 5)
    assert row.assets == Decimal("1000.00")
    assert row.liabilities == Decimal("200.00")


def test_upsert_replaces_values_for_existing_month(db):
    service = NetWorthService()
    service.save_or_update_net_worth(db, 2024, 5, Decimal("1000.00"), Decimal("200.00"))
    service.save_or_update_net_worth(db, 2024, 5, Decimal("1500.00"), Decimal("0.00"))

    found = service.get_net_worth(db, 2024, 5)
    assert found.assets == Decimal("1500.00")
    assert found.liabilities == Decimal("0.00")
    assert len(_rows(db)) == 1


def test_upsert_rejects_invalid_month(db):
    with pytest.raises(InvalidPeriodError):
        NetWorthService().save_or_update_net_worth(db, 2024, 13, Decimal("1"), Decimal("0"))


def test_upsert_losing_insert_race_updates_the_winner(db, session_factory, monkeypatch):
    other = session_factory()
    other.add(NetWorthModel(year=2024, month=6, assets=Decimal("1.00"), liabilities=Decimal("1.00")))
    other.commit()
    other.close()

    real_find = crud.find_net_worth_by_year_and_month
    calls = []

    def find_after_race(session, year, month):
        # First lookup happens "before" the other writer committed
        calls.append((year, month))
        if len(calls) == 1:
            return None
        return real_find(session, year, month)

    monkeypatch.setattr(crud, "find_net_worth_by_year_and_month", find_after_race)

    saved = crud.upsert_net_worth(db, 2024, 6, Decimal("500.00"), Decimal("100.00"))

    assert saved.assets == Decimal("500.00")
    [row] = _rows(db)
    assert row.liabilities == Decimal("100.00")


def test_history_is_ordered_by_year_then_month(db):
    service = NetWorthService()
    for year, month in [(2024, 2), (2023, 12), (2024, 1), (2023, 3)]:
        service.save_or_update_net_worth(db, year, month, Decimal("10.00"), Decimal("0.00"))

    history = service.get_history(db)

    assert [(h.year, h.month) for h in history] == [(2023, 3), (2023, 12), (2024, 1), (2024, 2)]


def test_ranged_history_filters_year_and_month_independently(db):
    service = NetWorthService()
    for year in (2023, 2024):
        for month in (1, 2, 6, 11, 12):
            service.save_or_update_net_worth(db, year, month, Decimal("10.00"), Decimal("0.00"))

    inside = service.get_history_in_range(db, 2023, 1, 2024, 6)
    assert [(h.year, h.month) for h in inside] == [
        (2023, 1), (2023, 2), (2023, 6), (2024, 1), (2024, 2), (2024, 6),
    ]

    # Rectangular filter: month 11 > month 2 leaves an empty box
    assert service.get_history_in_range(db, 2023, 11, 2024, 2) == []


def test_net_worth_from_assets_and_liabilities(db):
    net_worth_service = NetWorthService()
    assets = asset_service(net_worth_service)
    liabilities = liability_service(net_worth_service)

    assets.save(db, AssetCreate(year=2024, month=3, amount=Decimal("100.00"), comment="Compte"))
    assets.save(db, AssetCreate(year=2024, month=3, amount=Decimal("50.00")))
    liabilities.save(db, LiabilityCreate(year=2024, month=3, amount=Decimal("30.00"), comment="Carte"))

    stored = net_worth_service.get_net_worth(db, 2024, 3)
    assert stored.assets == Decimal("150.00")
    assert stored.liabilities == Decimal("30.00")
    assert NetWorth.model_validate(stored).net_worth == Decimal("120.00")


def test_deleting_last_holding_zeroes_the_month(db):
    net_worth_service = NetWorthService()
    assets = asset_service(net_worth_service)
    saved = assets.save(db, AssetCreate(year=2024, month=3, amount=Decimal("100.00")))

    assets.delete(db, saved.id)

    stored = net_worth_service.get_net_worth(db, 2024, 3)
    assert stored.assets == Decimal("0.00")
    assert stored.liabilities == Decimal("0.00")


def test_moving_a_holding_resyncs_both_months(db):
    net_worth_service = NetWorthService()
    assets = asset_service(net_worth_service)
    saved = assets.save(db, AssetCreate(year=2024, month=3, amount=Decimal("100.00")))

    assets.save(db, AssetCreate(id=saved.id, year=2024, month=4, amount=Decimal("80.00")))

    assert net_worth_service.get_net_worth(db, 2024, 3).assets == Decimal("0.00")
    assert net_worth_service.get_net_worth(db, 2024, 4).assets == Decimal("80.00")


def test_holding_with_unknown_id_is_not_found(db):
    assets = asset_service(NetWorthService())
    with pytest.raises(RecordNotFoundError):
        assets.save(db, AssetCreate(id=999, year=2024, month=3, amount=Decimal("1.00")))
    with pytest.raises(RecordNotFoundError):
        assets.delete(db, 999)


def _history(*values):
    return [
        NetWorth(id=i, year=2024, month=i + 1, assets=Decimal(v), liabilities=Decimal("0"))
        for i, v in enumerate(values)
    ]


def test_history_stats():
    stats = NetWorthService.history_stats(_history("1000", "1100", "1050", "1200"))

    assert stats.count == 4
    assert stats.current == Decimal("1200")
    assert stats.change_1m == Decimal("150")
    assert stats.change_3m == Decimal("200")
    assert stats.average_monthly_change == Decimal("66.67")
    assert stats.highest == Decimal("1200")
    assert stats.lowest == Decimal("1000")
    assert stats.first.month == 1
    assert stats.last.month == 4


def test_history_stats_three_month_change_falls_back_to_first():
    stats = NetWorthService.history_stats(_history("1000", "900", "1300"))

    assert stats.change_1m == Decimal("400")
    assert stats.change_3m == Decimal("300")
    assert stats.average_monthly_change == Decimal("150.00")


def test_history_stats_short_series():
    single = NetWorthService.history_stats(_history("500"))
    assert single.change_1m == Decimal("0")
    assert single.change_3m == Decimal("0")
    assert single.average_monthly_change == Decimal("0")
    assert single.highest == single.lowest == Decimal("500")

    empty = NetWorthService.history_stats([])
    assert empty.count == 0
    assert empty.first is None


def test_history_stats_wire_names():
    dumped = NetWorthService.history_stats(_history("1000", "1100")).model_dump(
        mode="json", by_alias=True
    )

    assert dumped["change1m"] == "100.00"
    assert dumped["change3m"] == "100.00"
    assert dumped["averageMonthlyChange"] == "100.00"
    assert "change1M" not in dumped


def test_period_lookups_reject_invalid_month(db):
    net_worth_service = NetWorthService()
    with pytest.raises(InvalidPeriodError):
        net_worth_service.get_net_worth(db, 2024, 13)
    with pytest.raises(InvalidPeriodError):
        asset_service(net_worth_service).get_by_month(db, 2024, 0)
    with pytest.raises(InvalidPeriodError):
        liability_service(net_worth_service).get_by_month(db, 2024, 13)
