from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mouna.database import get_db
from mouna.integrations.onesignal import OneSignalClient, get_notifier

from . import service

router = APIRouter()


@router.get("/check-expiry")
def check_expiry(
    db: Session = Depends(get_db),
    notifier: OneSignalClient = Depends(get_notifier),
):
    """Cron entry point: push one alert if anything expires within seven days."""
    return service.check_expiry(db, notifier)
