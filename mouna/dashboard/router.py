from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mouna.database import get_db
from mouna.schemas import CamelModel

from . import service

router = APIRouter()


class DashboardStats(CamelModel):
    total_products: int
    expired_count: int
    expiring_soon_count: int


@router.get("/dashboard-stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db)):
    return service.get_dashboard_stats(db)
