from collections.abc import AsyncIterator

from aidportal.domain.aid.service.aid_request import AidRequestService, original_filename
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.query import Query, QueryHandler, Result


class DownloadAttachment(Query):
    locator: str


class AttachmentStream(Result, arbitrary_types_allowed=True):
    stream: AsyncIterator[bytes]
    filename: str


class DownloadAttachmentHandler(QueryHandler[DownloadAttachment, AttachmentStream]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: DownloadAttachment) -> AttachmentStream:
        stream = await self.aid_request_service.open_attachment(self.principal, cmd.locator)
        return AttachmentStream(stream=stream, filename=original_filename(cmd.locator))
