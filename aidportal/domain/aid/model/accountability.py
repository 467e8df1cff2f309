"""Accountability package and its completeness gate."""

from aidportal.domain.aid.model.value import Attachment
from aidportal.domain.shared.error import IncompleteAccountabilityError
from aidportal.domain.shared.model.value import ValueObject

SLOT_ORDER = (
    "attendance_certificate",
    "presentation_certificate",
    "photo",
    "receipts",
)

SLOT_LABELS = {
    "attendance_certificate": "Certificado de participação",
    "presentation_certificate": "Certificado de apresentação",
    "photo": "Foto no evento",
    "receipts": "Notas fiscais",
}


class AccountabilityPackage(ValueObject):
    """Post-event proof of expenses, one attachment per slot (receipts: one or more)."""

    attendance_certificate: Attachment | None = None
    presentation_certificate: Attachment | None = None
    photo: Attachment | None = None
    receipts: list[Attachment] = []

    def missing_slots(self) -> list[str]:
        missing = [
            slot
            for slot in ("attendance_certificate", "presentation_certificate", "photo")
            if getattr(self, slot) is None
        ]
        if not self.receipts:
            missing.append("receipts")
        return missing

    def attachments(self) -> list[Attachment]:
        """Attachments supplied so far, in slot order."""
        singles = [self.attendance_certificate, self.presentation_certificate, self.photo]
        return [a for a in singles if a is not None] + list(self.receipts)


def validate_accountability(package: AccountabilityPackage) -> list[Attachment]:
    """Check every slot is filled and return the documents in canonical order.

    Order: attendance certificate, presentation certificate, photo, then
    receipts in submission order.

    Raises:
        IncompleteAccountabilityError: listing every missing slot.
    """
    attendance = package.attendance_certificate
    presentation = package.presentation_certificate
    photo = package.photo
    if attendance is None or presentation is None or photo is None or not package.receipts:
        raise IncompleteAccountabilityError(package.missing_slots())
    return [attendance, presentation, photo, *package.receipts]
