"""여행 지출 API."""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from app.api.dependencies import get_expense_or_404, get_trip_manager, get_trip_or_404
from app.api.share import attachment_disposition
from app.models import Expense, Trip
from app.schemas.trip import ExpenseCreateRequest, ExpenseResponse
from app.services.share_service import sanitize_filename
from app.services.trip_service import TripManager, export_expenses_csv

router = APIRouter(prefix="/api/v1", tags=["expenses"])


@router.post("/trips/{trip_id}/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def add_expense(
    request: ExpenseCreateRequest,
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> ExpenseResponse:
    """여행 예산 통화로 지출을 추가합니다."""
    expense = manager.add_validated_expense(
        trip,
        request.title,
        request.amount,
        category=request.category,
        date_incurred=request.date_incurred,
        notes=request.notes,
    )
    return ExpenseResponse.model_validate(expense)


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense: Expense = Depends(get_expense_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> Response:
    manager.delete_expense(expense)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/trips/{trip_id}/export/csv", response_class=PlainTextResponse)
def export_csv(trip: Trip = Depends(get_trip_or_404)) -> PlainTextResponse:  # noqa: B008
    filename = f"{sanitize_filename(trip.name)}_expenses.csv"
    return PlainTextResponse(
        export_expenses_csv(trip),
        media_type="text/csv",
        headers={"Content-Disposition": attachment_disposition(filename)},
    )
