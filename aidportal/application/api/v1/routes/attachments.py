"""Attachment upload and download."""

import re

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, UploadFile
from fastapi.responses import StreamingResponse

from aidportal.domain.aid.command.upload import (
    AttachmentUploaded,
    UploadAttachment,
    UploadAttachmentHandler,
)
from aidportal.domain.aid.query.download_attachment import (
    DownloadAttachment,
    DownloadAttachmentHandler,
)

router = APIRouter(prefix="/attachments", tags=["Attachments"], route_class=DishkaRoute)


@router.post("", response_model=AttachmentUploaded, status_code=201)
async def upload_attachment(
    file: UploadFile,
    handler: FromDishka[UploadAttachmentHandler],
) -> AttachmentUploaded:
    content = await file.read()
    return await handler.run(
        UploadAttachment(filename=file.filename or "file", content=content)
    )


@router.get("/{locator}")
async def download_attachment(
    locator: str,
    handler: FromDishka[DownloadAttachmentHandler],
) -> StreamingResponse:
    result = await handler.run(DownloadAttachment(locator=locator))
    safe_name = _sanitize_header_filename(result.filename)
    return StreamingResponse(
        result.stream,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{safe_name}"'},
    )


def _sanitize_header_filename(filename: str) -> str:
    """Strip characters that could break Content-Disposition headers."""
    return re.sub(r'[\r\n"]', "_", filename)
