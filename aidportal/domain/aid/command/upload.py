from aidportal.domain.aid.model.value import Attachment
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.auth.model.principal import Principal
from aidportal.domain.auth.model.role import Role
from aidportal.domain.shared.authorization.gate import at_least
from aidportal.domain.shared.command import Command, CommandHandler, Result


class UploadAttachment(Command):
    filename: str
    content: bytes


class AttachmentUploaded(Result):
    attachment: Attachment


class UploadAttachmentHandler(CommandHandler[UploadAttachment, AttachmentUploaded]):
    __auth__ = at_least(Role.EMPLOYEE)
    principal: Principal
    aid_request_service: AidRequestService

    async def run(self, cmd: UploadAttachment) -> AttachmentUploaded:
        attachment = await self.aid_request_service.upload_attachment(
            self.principal, cmd.filename, cmd.content
        )
        return AttachmentUploaded(attachment=attachment)
