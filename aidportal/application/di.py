from dishka import AsyncContainer, make_async_container

from aidportal.config import Config
from aidportal.domain.aid.util.di import AidProvider
from aidportal.domain.auth.util.di import AuthProvider
from aidportal.infrastructure.event.di import EventProvider
from aidportal.infrastructure.notification.di import NotificationProvider
from aidportal.infrastructure.persistence.di import PersistenceProvider
from aidportal.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars / AID_CONFIG_FILE at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        EventProvider(),
        NotificationProvider(),
        AuthProvider(),
        AidProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
