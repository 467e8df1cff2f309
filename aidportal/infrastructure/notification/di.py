from dishka import provide

from aidportal.config import Config
from aidportal.domain.notification.port.notifier import Notifier
from aidportal.infrastructure.notification.log import LoggingNotifier
from aidportal.infrastructure.notification.smtp import SmtpNotifier
from aidportal.util.di.base import Provider
from aidportal.util.di.scope import Scope


class NotificationProvider(Provider):
    @provide(scope=Scope.APP)
    def get_notifier(self, config: Config) -> Notifier:
        settings = config.notification
        if settings.backend == "smtp":
            return SmtpNotifier(settings)
        return LoggingNotifier(settings)
