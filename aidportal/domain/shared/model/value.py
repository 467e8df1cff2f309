from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable model compared by value (attachments, intents, packages)."""

    model_config = ConfigDict(frozen=True)
