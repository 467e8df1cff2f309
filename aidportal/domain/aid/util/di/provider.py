from dishka import provide

from aidportal.config import Config, PolicyConfig
from aidportal.domain.aid.command.accountability import (
    ApproveAccountabilityHandler,
    ConfirmPaymentHandler,
    SubmitAccountabilityHandler,
)
from aidportal.domain.aid.command.delete import DeleteRequestHandler
from aidportal.domain.aid.command.review import ApproveRequestHandler, RejectRequestHandler
from aidportal.domain.aid.command.submit import SubmitRequestHandler
from aidportal.domain.aid.command.upload import UploadAttachmentHandler
from aidportal.domain.aid.port.repository import AidRequestRepository
from aidportal.domain.aid.port.storage import AttachmentStorage
from aidportal.domain.aid.query.download_attachment import DownloadAttachmentHandler
from aidportal.domain.aid.query.eligibility import CheckEligibilityHandler
from aidportal.domain.aid.query.get_request import GetRequestHandler
from aidportal.domain.aid.query.list_requests import ListRequestsHandler
from aidportal.domain.aid.query.rules import GetRulesHandler
from aidportal.domain.aid.query.summary import GetSummaryHandler
from aidportal.domain.aid.service.aid_request import AidRequestService
from aidportal.domain.shared.outbox import Outbox
from aidportal.util.di.base import Provider
from aidportal.util.di.scope import Scope


class AidProvider(Provider):
    @provide(scope=Scope.APP)
    def get_policy(self, config: Config) -> PolicyConfig:
        return config.policy

    @provide(scope=Scope.UOW)
    def get_aid_request_service(
        self,
        request_repo: AidRequestRepository,
        storage: AttachmentStorage,
        outbox: Outbox,
        config: Config,
    ) -> AidRequestService:
        return AidRequestService(
            request_repo=request_repo,
            storage=storage,
            outbox=outbox,
            policy=config.policy,
            max_upload_bytes=config.storage.max_upload_bytes,
        )

    # Command Handlers
    submit_handler = provide(SubmitRequestHandler, scope=Scope.UOW)
    approve_handler = provide(ApproveRequestHandler, scope=Scope.UOW)
    reject_handler = provide(RejectRequestHandler, scope=Scope.UOW)
    submit_accountability_handler = provide(SubmitAccountabilityHandler, scope=Scope.UOW)
    approve_accountability_handler = provide(ApproveAccountabilityHandler, scope=Scope.UOW)
    confirm_payment_handler = provide(ConfirmPaymentHandler, scope=Scope.UOW)
    delete_handler = provide(DeleteRequestHandler, scope=Scope.UOW)
    upload_handler = provide(UploadAttachmentHandler, scope=Scope.UOW)

    # Query Handlers
    get_request_handler = provide(GetRequestHandler, scope=Scope.UOW)
    list_requests_handler = provide(ListRequestsHandler, scope=Scope.UOW)
    eligibility_handler = provide(CheckEligibilityHandler, scope=Scope.UOW)
    summary_handler = provide(GetSummaryHandler, scope=Scope.UOW)
    download_handler = provide(DownloadAttachmentHandler, scope=Scope.UOW)
    rules_handler = provide(GetRulesHandler, scope=Scope.UOW)
