"""Published program rules."""

from aidportal.config import PolicyConfig
from aidportal.domain.aid.model.accountability import SLOT_LABELS, SLOT_ORDER
from aidportal.domain.aid.model.value import Modality
from aidportal.domain.shared.authorization.gate import public
from aidportal.domain.shared.query import Query, QueryHandler, Result

MODALITY_RULES: dict[Modality, dict[str, object]] = {
    Modality.I: {
        "description": "Apresentação de trabalhos sem perspectiva de publicação em revistas científicas.",
        "requirements": [
            "Apresentação como autor.",
            "Apenas um beneficiário por trabalho.",
            "Concedido uma única vez anualmente.",
        ],
    },
    Modality.II: {
        "description": "Apresentação de trabalhos com perspectiva de publicação em revistas científicas.",
        "requirements": [
            "Apresentação como autor.",
            "Comprovante do comitê de ética obrigatório.",
            "Novo pedido só após comprovação da publicação do anterior.",
        ],
    },
}

REIMBURSABLE_ITEMS = [
    "Nota fiscal de passagens aéreas, com o número do CPF do beneficiário.",
    "Nota fiscal de passagens de ônibus, com o número do CPF do beneficiário.",
    "Nota fiscal de posto de combustível (Consumo 8Km/L), com o CPF do beneficiário.",
    "Comprovante de praça de pedágio do dia e do percurso da viagem.",
    "Nota fiscal de hotel da cidade do evento (limite 3 dias antes/depois).",
    "Comprovante de hospedagem em AirBnB (limite 3 dias antes/depois).",
    "Nota fiscal de restaurantes do período, com o CPF do beneficiário.",
    "Comprovante de inscrição do evento no nome do beneficiário.",
    "Comprovante de inscrição em curso do evento no nome do beneficiário.",
    "Outros comprovantes combinados previamente com a Coordenação.",
]


class GetRules(Query):
    pass


class ModalityRule(Result):
    modality: Modality
    title: str
    description: str
    requirements: list[str]
    lead_time_days: int


class AccountabilityDocument(Result):
    slot: str
    label: str


class ProgramRules(Result):
    modalities: list[ModalityRule]
    reimbursable_items: list[str]
    accountability_documents: list[AccountabilityDocument]
    accountability_deadline_days: int
    reimbursement_period_days: int


class GetRulesHandler(QueryHandler[GetRules, ProgramRules]):
    __auth__ = public()
    policy: PolicyConfig

    async def run(self, cmd: GetRules) -> ProgramRules:
        return ProgramRules(
            modalities=[
                ModalityRule(
                    modality=modality,
                    title=modality.label,
                    description=str(rule["description"]),
                    requirements=list(rule["requirements"]),  # type: ignore[call-overload]
                    lead_time_days=self.policy.lead_time_days,
                )
                for modality, rule in MODALITY_RULES.items()
            ],
            reimbursable_items=REIMBURSABLE_ITEMS,
            accountability_documents=[
                AccountabilityDocument(slot=slot, label=SLOT_LABELS[slot]) for slot in SLOT_ORDER
            ],
            accountability_deadline_days=self.policy.accountability_deadline_days,
            reimbursement_period_days=self.policy.reimbursement_period_days,
        )
