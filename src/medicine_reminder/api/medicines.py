"""Medicine endpoints behind the access gate."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from medicine_reminder.api.schemas import MedicineCreate  # noqa: TC001
from medicine_reminder.domain.views import HistoryFilter
from medicine_reminder.services.greetings import greeting_for, quote_for
from medicine_reminder.services.medicines import UnsupportedClearError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from medicine_reminder.containers import AppContainer
    from medicine_reminder.domain.medicines import MedicineRecord
    from medicine_reminder.services.reminders import ReminderBatch

PERMISSION_ALERT = "Notifications are disabled, reminders were not scheduled."


def _get_access_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.access_token


async def require_access(
    x_access_token: str | None = Header(default=None),
    access_token: str | None = Depends(_get_access_token),
) -> None:
    """Ensure requests carry the access token when one is configured."""
    if access_token is None:
        return
    if not x_access_token or x_access_token != access_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(dependencies=[Depends(require_access)])


@router.get("/medicines")
async def list_medicines(request: Request) -> dict[str, object]:
    """Return every medicine in insertion order."""
    container: AppContainer = request.app.state.container
    return {"medicines": _records_payload(container.medicine_store.records)}


@router.post("/medicines")
async def add_medicine(payload: MedicineCreate, request: Request) -> dict[str, object]:
    """Add a medicine and schedule its reminders."""
    container: AppContainer = request.app.state.container
    draft = payload.to_draft(container.clock.today())
    records, created = container.medicine_store.add(draft)
    if created is None:
        return {"medicine": None, "reminders": None, "count": len(records)}
    batch = await container.reminder_scheduler.schedule_reminders(
        created.name, draft.time, draft.frequency
    )
    return {
        "medicine": _medicine_payload(created),
        "reminders": _batch_payload(batch),
        "count": len(records),
    }


@router.post("/medicines/{medicine_id}/toggle")
async def toggle_medicine(medicine_id: str, request: Request) -> dict[str, object]:
    """Flip the taken flag of a medicine."""
    container: AppContainer = request.app.state.container
    records = container.medicine_store.toggle(medicine_id)
    return {"medicines": _records_payload(records)}


@router.delete("/medicines/{medicine_id}")
async def delete_medicine(medicine_id: str, request: Request) -> dict[str, object]:
    """Delete a medicine."""
    container: AppContainer = request.app.state.container
    records = container.medicine_store.remove(medicine_id)
    return {"medicines": _records_payload(records)}


@router.delete("/medicines")
async def clear_medicines(request: Request) -> dict[str, object]:
    """Delete every medicine."""
    container: AppContainer = request.app.state.container
    records = container.medicine_store.clear()
    return {"medicines": _records_payload(records)}


@router.get("/today")
async def today(request: Request) -> dict[str, object]:
    """Return today's schedule with progress and a greeting."""
    container: AppContainer = request.app.state.container
    schedule = container.view_service.today()
    now = container.clock.now()
    return {
        "date": now.date().isoformat(),
        "greeting": greeting_for(now),
        "quote": quote_for(now),
        "taken": schedule.taken_count,
        "total": schedule.total,
        "percent": schedule.percent,
        "medicines": _records_payload(schedule.records),
    }


@router.get("/calendar")
async def calendar(
    request: Request, selected: date | None = Query(default=None, alias="date")
) -> dict[str, object]:
    """Return per-day marks and the medicines of the selected day."""
    container: AppContainer = request.app.state.container
    marks, day_records = container.view_service.calendar(selected)
    return {
        "marks": {
            day_key: {"status": mark.value, "color": mark.color}
            for day_key, mark in marks.items()
        },
        "selected_date": selected.isoformat() if selected else None,
        "medicines": _records_payload(day_records),
    }


@router.get("/history")
async def history(
    request: Request,
    mode: HistoryFilter = HistoryFilter.TAKEN,
    search: str = "",
) -> dict[str, object]:
    """Return history for a tab, narrowed by a name search."""
    container: AppContainer = request.app.state.container
    records = container.view_service.history(mode, search)
    return {"mode": mode.value, "medicines": _records_payload(records)}


@router.post("/history/clear")
async def clear_history(request: Request, mode: HistoryFilter) -> dict[str, object]:
    """Delete every medicine in the taken or missed tab."""
    container: AppContainer = request.app.state.container
    try:
        records = container.medicine_store.clear_filtered(mode)
    except UnsupportedClearError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return {"medicines": _records_payload(records)}


@router.delete("/reminders")
async def cancel_reminders(request: Request) -> dict[str, str]:
    """Cancel every scheduled reminder."""
    container: AppContainer = request.app.state.container
    await container.reminder_scheduler.cancel_all()
    return {"status": "ok"}


def _medicine_payload(record: MedicineRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "name": record.name,
        "dosage": record.dosage,
        "type": record.type.value,
        "type_icon": record.type.icon,
        "time": record.time,
        "frequency": record.frequency.value,
        "frequency_icon": record.frequency.icon,
        "start_date": record.start_date,
        "taken": record.taken,
    }


def _records_payload(records: Iterable[MedicineRecord]) -> list[dict[str, object]]:
    return [_medicine_payload(record) for record in records]


def _batch_payload(batch: ReminderBatch) -> dict[str, object]:
    return {
        "scheduled": len(batch.handles),
        "failed": [at.isoformat() for at in batch.failures],
        "permission_denied": batch.permission_denied,
        "alert": PERMISSION_ALERT if batch.alert else None,
    }
