"""Repository classes for plan output persistence."""

from __future__ import annotations

import json
from typing import List

from sqlalchemy.orm import Session

from .models import ConsolidatedPlan
from .tables import PlanEntry


class PlanRepository:
    """Repository for consolidated plan rows."""

    @staticmethod
    def get_by_year(session: Session, target_year: int) -> List[PlanEntry]:
        """Get all plan rows for a target year, in plan order."""
        return (
            session.query(PlanEntry)
            .filter(PlanEntry.target_year == target_year)
            .order_by(PlanEntry.row_id)
            .all()
        )

    @staticmethod
    def get_unplanned(session: Session, target_year: int) -> List[PlanEntry]:
        """Get rows flagged as unplanned for a target year."""
        return (
            session.query(PlanEntry)
            .filter(PlanEntry.target_year == target_year, PlanEntry.unplanned.is_(True))
            .order_by(PlanEntry.row_id)
            .all()
        )

    @staticmethod
    def save_plan(session: Session, plan: ConsolidatedPlan, target_year: int) -> int:
        """
        Store every row of a consolidated plan.

        Args:
            session: Database session
            plan: Plan to store
            target_year: Year the plan was built for

        Returns:
            Number of rows stored
        """
        entries = []
        for row in plan.rows:
            entries.append(PlanEntry(
                target_year=target_year,
                row_id=row.row_id,
                cohort=row.cohort,
                roster_row=row.person.row_number,
                birth_date=row.person.birth_date,
                gender=row.person.gender,
                unplanned=row.unplanned,
                visit_dates=";".join(v.isoformat() for v in row.visits if v is not None),
                fields_json=json.dumps(dict(row.person.fields), default=str, ensure_ascii=False),
            ))
        session.add_all(entries)
        session.commit()
        return len(entries)

    @staticmethod
    def delete_by_year(session: Session, target_year: int) -> int:
        """Delete all plan rows for a target year."""
        count = session.query(PlanEntry).filter(PlanEntry.target_year == target_year).delete()
        session.commit()
        return count
