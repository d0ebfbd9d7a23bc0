from __future__ import annotations

from typing import Optional

from claimsdesk.core.errors import ForbiddenError
from claimsdesk.models.people import SalespersonRecord
from claimsdesk.shared.base import BaseSchema

DIRECTOR_ROLE = "sales_director"


class ViewAsContext(BaseSchema):
    current_salesperson: Optional[SalespersonRecord] = None
    viewing_as: Optional[SalespersonRecord] = None
    is_director: bool = False

    @property
    def is_viewing_as_other(self) -> bool:
        return self.viewing_as is not None

    @property
    def effective_salesperson(self) -> Optional[SalespersonRecord]:
        return self.viewing_as or self.current_salesperson


def build_view_as_context(
    current: Optional[SalespersonRecord],
    viewing_as: Optional[SalespersonRecord] = None,
) -> ViewAsContext:
    is_director = bool(current and current.role == DIRECTOR_ROLE)
    if viewing_as is not None and (current is None or viewing_as.id != current.id):
        if not is_director:
            raise ForbiddenError("Only sales directors can view as another salesperson")
    else:
        viewing_as = None
    return ViewAsContext(
        current_salesperson=current,
        viewing_as=viewing_as,
        is_director=is_director,
    )
