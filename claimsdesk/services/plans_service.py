from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from claimsdesk.core.errors import AppError, BackendError, ConflictError, NotFoundError
from claimsdesk.models.planning import SalesPlanRecord
from claimsdesk.repositories.notifications_repository import NotificationsRepository
from claimsdesk.repositories.people_repository import PeopleRepository
from claimsdesk.repositories.plans_repository import PlansRepository
from claimsdesk.schemas.goals import (
    PendingPlan,
    PendingPlanList,
    PlanReviewRequest,
    PlanSaveRequest,
    PlanSubmitRequest,
    SalesPlan,
)

logger = logging.getLogger(__name__)

DRAFT = "draft"
PENDING_APPROVAL = "pending_approval"
APPROVED = "approved"
REJECTED = "rejected"

RELATED_ENTITY = "sales_plan"
FALLBACK_NAME = "A team member"

# Allowed source states per transition target.
TRANSITIONS: Dict[str, frozenset[str]] = {
    PENDING_APPROVAL: frozenset({DRAFT, REJECTED}),
    APPROVED: frozenset({PENDING_APPROVAL}),
    REJECTED: frozenset({PENDING_APPROVAL}),
}


def plan_status(plan: SalesPlanRecord) -> str:
    return plan.approval_status or DRAFT


def ensure_transition(current: str, target: str) -> None:
    if current not in TRANSITIONS.get(target, frozenset()):
        raise ConflictError(f"Cannot move plan from {current} to {target}")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PlansService:
    def __init__(
        self,
        repository: PlansRepository,
        people_repository: PeopleRepository,
        notifications_repository: NotificationsRepository,
    ) -> None:
        self.repository = repository
        self.people_repository = people_repository
        self.notifications_repository = notifications_repository

    def get_plan(self, salesperson_id: str, year: int) -> Optional[SalesPlan]:
        plan = self.repository.get_plan(salesperson_id, year)
        return self._to_plan(plan) if plan else None

    def save_plan(self, request: PlanSaveRequest) -> SalesPlan:
        payload = request.model_dump()
        existing = self.repository.get_plan(request.salesperson_id, request.year)
        if existing is None:
            payload.update({"is_active": True, "approval_status": DRAFT})
            return self._to_plan(self.repository.insert_plan(payload))

        status = plan_status(existing)
        if status == APPROVED:
            raise ConflictError("Approved plans cannot be edited")
        if status == REJECTED:
            payload["approval_status"] = DRAFT
        updated = self.repository.update_plan(existing.id, payload)
        if not updated:
            raise NotFoundError("Sales plan not found")
        return self._to_plan(updated)

    def submit_plan(self, plan_id: str, request: PlanSubmitRequest) -> SalesPlan:
        plan = self._require_plan(plan_id)
        ensure_transition(plan_status(plan), PENDING_APPROVAL)
        updated = self._update_status(
            plan_id,
            {"approval_status": PENDING_APPROVAL, "submitted_at": _now_iso(), "reviewer_notes": None},
        )

        director_id = request.director_id
        if director_id is None:
            director = self.people_repository.get_director()
            director_id = director.id if director else None
        if director_id is None:
            logger.warning("Plan %s submitted but no sales director is configured", plan_id)
            return self._to_plan(updated)

        sender_name = self._name_of(plan.salesperson_id)
        self._notify(
            recipient_id=director_id,
            sender_id=plan.salesperson_id,
            notification_type="plan_submitted",
            message=f"{sender_name} has submitted their sales plan for approval",
            plan_id=plan_id,
        )
        return self._to_plan(updated)

    def approve_plan(self, plan_id: str, request: PlanReviewRequest) -> SalesPlan:
        plan = self._require_plan(plan_id)
        ensure_transition(plan_status(plan), APPROVED)
        updated = self._update_status(
            plan_id,
            {
                "approval_status": APPROVED,
                "approved_at": _now_iso(),
                "reviewer_notes": (request.notes or "").strip() or None,
            },
        )
        self._notify(
            recipient_id=plan.salesperson_id,
            sender_id=request.reviewer_id,
            notification_type="plan_approved",
            message=f"{self._name_of(request.reviewer_id)} has approved your sales plan",
            plan_id=plan_id,
        )
        return self._to_plan(updated)

    def reject_plan(self, plan_id: str, request: PlanReviewRequest) -> SalesPlan:
        notes = (request.notes or "").strip()
        if not notes:
            raise AppError(
                code="validation_error",
                message="Reviewer notes are required when requesting revisions",
                status_code=422,
            )
        plan = self._require_plan(plan_id)
        ensure_transition(plan_status(plan), REJECTED)
        updated = self._update_status(
            plan_id, {"approval_status": REJECTED, "reviewer_notes": notes}
        )
        self._notify(
            recipient_id=plan.salesperson_id,
            sender_id=request.reviewer_id,
            notification_type="plan_rejected",
            message=(
                f"{self._name_of(request.reviewer_id)} has requested revisions on your sales plan: "
                f"{notes}"
            ),
            plan_id=plan_id,
        )
        return self._to_plan(updated)

    def list_pending_approvals(self) -> PendingPlanList:
        plans = self.repository.list_pending_approval()
        people = self.people_repository.list_salespeople_by_ids(
            sorted({plan.salesperson_id for plan in plans})
        )
        names = {person.id: person.name for person in people}
        return PendingPlanList(
            items=[
                PendingPlan(
                    plan=self._to_plan(plan),
                    salesperson_name=names.get(plan.salesperson_id, FALLBACK_NAME),
                )
                for plan in plans
            ]
        )

    def _update_status(self, plan_id: str, payload: Dict[str, Any]) -> SalesPlanRecord:
        updated = self.repository.update_plan(plan_id, payload)
        if not updated:
            raise NotFoundError("Sales plan not found")
        return updated

    def _notify(
        self,
        recipient_id: str,
        sender_id: str,
        notification_type: str,
        message: str,
        plan_id: str,
    ) -> None:
        try:
            self.notifications_repository.insert_notification(
                {
                    "recipient_id": recipient_id,
                    "sender_id": sender_id,
                    "type": notification_type,
                    "message": message,
                    "related_entity": RELATED_ENTITY,
                    "related_id": plan_id,
                    "is_read": False,
                }
            )
        except httpx.HTTPError as exc:
            # Status change is already persisted and is not rolled back.
            logger.error(
                "Plan %s status updated but %s notification failed: %s",
                plan_id,
                notification_type,
                exc,
            )
            raise BackendError("Plan status updated but the notification could not be sent") from exc

    def _name_of(self, salesperson_id: str) -> str:
        person = self.people_repository.get_salesperson(salesperson_id)
        return person.name if person else FALLBACK_NAME

    def _require_plan(self, plan_id: str) -> SalesPlanRecord:
        plan = self.repository.get_plan_by_id(plan_id)
        if not plan:
            raise NotFoundError("Sales plan not found")
        return plan

    @staticmethod
    def _to_plan(plan: SalesPlanRecord) -> SalesPlan:
        data = plan.model_dump()
        data["approval_status"] = plan_status(plan)
        return SalesPlan.model_validate(data)
