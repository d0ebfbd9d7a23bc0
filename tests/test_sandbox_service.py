from __future__ import annotations

import json
import threading
from datetime import date

import pytest

from claimsdesk.core.errors import NotFoundError
from claimsdesk.repositories.sandbox_store import SANDBOX_KEY, SandboxStore
from claimsdesk.schemas.sandbox import HypotheticalDealCreateRequest, HypotheticalDealUpdateRequest
from claimsdesk.services.sandbox_service import SandboxService


@pytest.fixture()
def service(tmp_path) -> SandboxService:
    return SandboxService(store=SandboxStore(path=str(tmp_path / "sandbox.json")))


def _request(**overrides: object) -> HypotheticalDealCreateRequest:
    data = dict(
        client_name="Grace Chapel",
        expected_value=2_000_000,
        expected_close_date=date(2025, 5, 15),
        category="religious",
        probability=50,
    )
    data.update(overrides)
    return HypotheticalDealCreateRequest(**data)


def test_empty_sandbox_defaults(service: SandboxService) -> None:
    response = service.get_sandbox()
    assert response.state.deals == []
    assert response.state.is_active is False
    assert response.aggregates.deal_count == 0
    assert set(response.aggregates.by_quarter) == {"Q1", "Q2", "Q3", "Q4"}


def test_add_deal_updates_aggregates(service: SandboxService) -> None:
    service.add_deal(_request())
    response = service.add_deal(_request(expected_value=1_000_000, category="school", probability=100))

    aggregates = response.aggregates
    assert aggregates.deal_count == 2
    assert aggregates.total_value == 3_000_000
    assert aggregates.weighted_value == 2_000_000
    assert aggregates.by_quarter["Q2"].count == 2
    assert aggregates.by_category["religious"].weighted == 1_000_000
    assert aggregates.by_category["school"].value == 1_000_000


def test_state_survives_a_new_store(tmp_path) -> None:
    path = str(tmp_path / "sandbox.json")
    SandboxService(store=SandboxStore(path=path)).add_deal(_request())
    reloaded = SandboxService(store=SandboxStore(path=path)).get_sandbox()
    assert len(reloaded.state.deals) == 1
    stored = json.loads((tmp_path / "sandbox.json").read_text(encoding="utf-8"))
    assert stored[SANDBOX_KEY]["deals"][0]["clientName"] == "Grace Chapel"


def test_toggle_flips_active_flag(service: SandboxService) -> None:
    assert service.toggle().state.is_active is True
    assert service.toggle().state.is_active is False


def test_update_deal_keeps_unset_fields(service: SandboxService) -> None:
    deal_id = service.add_deal(_request(notes="first call")).state.deals[0].id
    response = service.update_deal(deal_id, HypotheticalDealUpdateRequest(probability=80))
    deal = response.state.deals[0]
    assert deal.probability == 80
    assert deal.client_name == "Grace Chapel"
    assert deal.notes == "first call"


def test_update_deal_can_clear_notes(service: SandboxService) -> None:
    deal_id = service.add_deal(_request(notes="first call")).state.deals[0].id
    response = service.update_deal(deal_id, HypotheticalDealUpdateRequest(notes=None))
    assert response.state.deals[0].notes is None


def test_unknown_deal_raises(service: SandboxService) -> None:
    with pytest.raises(NotFoundError):
        service.update_deal("missing", HypotheticalDealUpdateRequest(probability=10))
    with pytest.raises(NotFoundError):
        service.remove_deal("missing")


def test_remove_deal(service: SandboxService) -> None:
    deal_id = service.add_deal(_request()).state.deals[0].id
    assert service.remove_deal(deal_id).state.deals == []


def test_clear_resets_deals_and_deactivates(service: SandboxService) -> None:
    service.add_deal(_request())
    service.toggle()
    response = service.clear()
    assert response.state.model_dump(by_alias=True) == {"deals": [], "isActive": False}
    assert service.get_sandbox().state.deals == []


def test_malformed_store_loads_empty_state(tmp_path) -> None:
    path = tmp_path / "sandbox.json"
    path.write_text("{not json", encoding="utf-8")
    response = SandboxService(store=SandboxStore(path=str(path))).get_sandbox()
    assert response.state.deals == []


def test_concurrent_adds_keep_every_deal(tmp_path) -> None:
    path = str(tmp_path / "sandbox.json")
    workers = 16
    barrier = threading.Barrier(workers)
    errors: list = []

    def add(index: int) -> None:
        service = SandboxService(store=SandboxStore(path=path))
        barrier.wait()
        try:
            service.add_deal(_request(client_name=f"Client {index}"))
        except Exception as exc:  # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=add, args=(index,)) for index in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    deals = SandboxService(store=SandboxStore(path=path)).get_sandbox().state.deals
    assert sorted(deal.client_name for deal in deals) == sorted(f"Client {i}" for i in range(workers))


def test_failed_change_leaves_store_untouched(service: SandboxService) -> None:
    service.add_deal(_request())
    with pytest.raises(NotFoundError):
        service.remove_deal("missing")
    assert len(service.get_sandbox().state.deals) == 1
    assert list(service.store.path.parent.glob("*.tmp")) == []
