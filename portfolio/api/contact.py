import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status

from portfolio.config import Settings
from portfolio.dependencies import get_app_settings, get_storage
from portfolio.schemas import ActionResult, MessageCreate
from portfolio.services.notifications import notify_new_message
from portfolio.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["contact"])


@router.post("/contact", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
def create_contact_message(
    data: MessageCreate,
    background_tasks: BackgroundTasks,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    """
    Save a contact form submission, then notify the owner.
    Notification runs after the response and can't undo the saved message.
    """
    message = storage.create_message(data)
    logger.info("Saved contact message #%s from %s", message.id, message.email)

    background_tasks.add_task(notify_new_message, message, settings)

    return ActionResult(success=True, message="Message sent successfully")
