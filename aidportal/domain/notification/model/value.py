from aidportal.domain.shared.model.value import ValueObject


class Recipient(ValueObject):
    name: str
    email: str
