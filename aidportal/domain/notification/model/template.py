"""Message templates for each notification kind."""

from typing import Any

from aidportal.domain.aid.model.value import TemplateKind
from aidportal.domain.shared.model.value import ValueObject

SIGNATURE = "\n\nAtenciosamente,\nEquipe CITI"

TEMPLATES: dict[TemplateKind, tuple[str, str]] = {
    TemplateKind.REQUEST_RECEIVED: (
        "Solicitação Recebida - CITI",
        "Olá {requester_name},\n\n"
        'Recebemos sua solicitação para o evento "{event_name}" ({modality}).\n'
        "Ela será analisada pelos comitês Científico e Administrativo.",
    ),
    TemplateKind.APPROVED: (
        "Auxílio Aprovado - CITI",
        "Parabéns! Sua solicitação para {event_name} foi aprovada pelos comitês "
        "Científico e Administrativo.\n\n"
        "Próximo passo: participe do evento e envie a prestação de contas.",
    ),
    TemplateKind.REJECTED: (
        "Solicitação Recusada - CITI",
        "Olá {requester_name},\n\nSua solicitação para {event_name} foi recusada.{reason_line}",
    ),
    TemplateKind.ACCOUNTABILITY_RECEIVED: (
        "Prestação de Contas Enviada",
        "Recebemos os documentos de prestação de contas para o evento {event_name}.",
    ),
    TemplateKind.ACCOUNTABILITY_APPROVED: (
        "Atualização do Pedido - CITI",
        "Sua prestação de contas foi aprovada. O reembolso entrou na fila de pagamento.",
    ),
    TemplateKind.REIMBURSEMENT_COMPLETED: (
        "Atualização do Pedido - CITI",
        "O reembolso foi efetuado e o processo foi finalizado.",
    ),
}


class RenderedMessage(ValueObject):
    subject: str
    body: str


class _SafeDict(dict[str, Any]):
    def __missing__(self, key: str) -> str:
        return ""


def render(kind: TemplateKind, context: dict[str, Any]) -> RenderedMessage:
    subject, body = TEMPLATES[kind]
    values = _SafeDict(context)
    reason = context.get("reason")
    values["reason_line"] = f"\n\nMotivo: {reason}" if reason else ""
    return RenderedMessage(
        subject=subject.format_map(values),
        body=body.format_map(values) + SIGNATURE,
    )
