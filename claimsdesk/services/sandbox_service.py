from __future__ import annotations

from typing import Any, Dict
from uuid import uuid4

from claimsdesk.analytics.sandbox import sandbox_aggregates
from claimsdesk.core.errors import NotFoundError
from claimsdesk.repositories.sandbox_store import SandboxStore
from claimsdesk.schemas.sandbox import (
    HypotheticalDeal,
    HypotheticalDealCreateRequest,
    HypotheticalDealUpdateRequest,
    SandboxResponse,
    SandboxState,
)


def _changes(request: HypotheticalDealUpdateRequest) -> Dict[str, Any]:
    # Only notes may be cleared explicitly.
    return {
        key: value
        for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key == "notes"
    }


class SandboxService:
    def __init__(self, store: SandboxStore) -> None:
        self.store = store

    def get_sandbox(self) -> SandboxResponse:
        return self._response(self.store.load())

    def toggle(self) -> SandboxResponse:
        def flip(state: SandboxState) -> None:
            state.is_active = not state.is_active

        return self._response(self.store.update(flip))

    def add_deal(self, request: HypotheticalDealCreateRequest) -> SandboxResponse:
        deal = HypotheticalDeal(id=str(uuid4()), **request.model_dump())

        def append(state: SandboxState) -> None:
            state.deals.append(deal)

        return self._response(self.store.update(append))

    def update_deal(self, deal_id: str, request: HypotheticalDealUpdateRequest) -> SandboxResponse:
        changes = _changes(request)

        def apply(state: SandboxState) -> None:
            for index, deal in enumerate(state.deals):
                if deal.id == deal_id:
                    state.deals[index] = deal.model_copy(update=changes)
                    return
            raise NotFoundError("Hypothetical deal not found")

        return self._response(self.store.update(apply))

    def remove_deal(self, deal_id: str) -> SandboxResponse:
        def remove(state: SandboxState) -> None:
            remaining = [deal for deal in state.deals if deal.id != deal_id]
            if len(remaining) == len(state.deals):
                raise NotFoundError("Hypothetical deal not found")
            state.deals = remaining

        return self._response(self.store.update(remove))

    def clear(self) -> SandboxResponse:
        return self._response(self.store.update(lambda _state: SandboxState()))

    @staticmethod
    def _response(state: SandboxState) -> SandboxResponse:
        return SandboxResponse(state=state, aggregates=sandbox_aggregates(state.deals))
