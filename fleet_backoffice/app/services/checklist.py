"""
Vehicle inspection checklist service.

Holds the fixed inspection template and the rollup rules: every item that is
not marked conforming counts as a non-conformity, and any non-conformity
fails the inspection.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from fleet_backoffice.app.models.checklist import ChecklistStatus

logger = logging.getLogger("fleet.checklists")

INSPECTION_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

# (key, title, item descriptions)
CHECKLIST_SECTIONS: List[Tuple[str, str, List[str]]] = [
    ("documentation", "Documentação e Obrigatoriedade Legal", [
        "CNH do Motorista (Válida e na Categoria Correta)",
        "CRLV (Licenciamento) (Veículo e Implemento, válidos)",
        "Exame Toxicológico (Se aplicável à categoria)",
        "Extintor de Incêndio (Cheio, Válido e Acessível)",
        "Triângulo de Sinalização (Completo e íntegro)",
        "Macaco e Chave de Roda (Em condições de uso)",
    ]),
    ("brakes_and_tyres", "Sistema de Freios e Rodagem", [
        "Pressão dos Pneus (Conforme manual de carga)",
        "Profundidade dos Sulcos (TWI) (Acima do limite legal)",
        "Estado Visual dos Pneus (Sem bolhas, cortes ou avarias laterais)",
        "Rodas e Fixação (Sem folgas, porcas apertadas e íntegras)",
        "Freio de Serviço (Pedal) (Acionamento firme, sem 'borracha')",
        "Freio de Estacionamento (Travamento eficiente)",
        "Nível de Fluido de Freio (Dentro da marcação MIN/MAX)",
        "Estepe (Calibrado e em condições de uso)",
    ]),
    ("fluids_and_engine", "Níveis de Fluidos e Motor", [
        "Nível de Óleo do Motor (Entre as marcas de verificação)",
        "Nível de Água do Radiador (Líquido de arrefecimento)",
        "Nível de Arla 32 (Se veículo for Diesel Euro V/VI)",
        "Vazamentos Aparentes (Motor, transmissão, eixos)",
        "Mangueiras e Correias (Sem rachaduras, bom tensionamento)",
        "Funcionamento do Motor (Marcha lenta estável, sem ruídos estranhos)",
        "Filtro de Ar (Sem obstrução visível)",
    ]),
    ("lighting", "Iluminação, Sinalização e Elétrica", [
        "Faróis (Alto e Baixo)",
        "Lanternas Dianteiras e Traseiras",
        "Luzes de Freio (Incluindo 3ª Luz de Freio)",
        "Luzes Indicadoras de Direção (Setas)",
        "Pisca-Alerta (Funcionamento simultâneo)",
        "Buzina e Limpador de Para-brisa",
        "Painel de Instrumentos (Sem luzes de alerta acesas)",
    ]),
    ("cab", "Cabine e Condições Gerais", [
        "Para-brisa e Vidros (Sem trincas ou avarias que obstruam a visão)",
        "Espelhos Retrovisores (Limpos, fixos e sem quebras)",
        "Condição do Assento e Cinto (Ajustáveis e funcionais)",
        "Nível de Combustível (Recomendado: acima de 1/4 do tanque)",
        "Limpeza e Organização da Cabine (Sem lixo ou objetos soltos)",
        "Tapetes e Forrações (Limpos e sem danos significativos)",
        "Maçanetas Externas e Internas (Funcionamento suave e sem quebras)",
        "Pintura Danificada (Cabine) (Pontos de ferrugem, riscos profundos)",
        "Lataria Danificada (Cabine) (Amassados, partes soltas ou desalinhadas)",
        "Tacógrafo (Funcionando e aferido)",
    ]),
    ("implement", "Implemento e Segurança da Carga", [
        "Estado Geral do Implemento (Estrutura e Chassi sem trincas ou deformações)",
        "Pintura Danificada (Implemento) (Rachaduras ou perda de pintura que exponham o material)",
        "Lataria Danificada (Implemento) (Amassados profundos ou painéis soltos)",
        "Portas/Tampas e Travamento (Vedação e fechaduras eficientes e seguras)",
        "Piso do Compartimento de Carga (Limpo, seco e sem avarias estruturais)",
        "Dispositivos de Amarração (Cintas, catracas ou pontos de fixação íntegros)",
        "Lacre/Segurança da Carga (Verificar integridade/número do lacre, se aplicável)",
    ]),
]

SECTION_SIZES: Dict[str, int] = {key: len(items) for key, _, items in CHECKLIST_SECTIONS}
TOTAL_ITEMS = sum(SECTION_SIZES.values())


def build_template() -> Dict[str, Dict[str, Any]]:
    """
    Blank inspection: every item starts non-conforming with empty observations.

    Returns a fresh structure on every call so callers may mutate it.
    """
    return {
        key: {
            "title": title,
            "items": [
                {"description": description, "conforming": False, "observations": ""}
                for description in descriptions
            ],
        }
        for key, title, descriptions in CHECKLIST_SECTIONS
    }


def count_non_conformities(sections: Dict[str, Dict[str, Any]]) -> int:
    """Number of items not marked conforming, across all sections."""
    total = 0
    for section in sections.values():
        for item in section.get("items", []):
            if not item.get("conforming", False):
                total += 1
    return total


def final_status(non_conformities: int) -> ChecklistStatus:
    if non_conformities == 0:
        return ChecklistStatus.APPROVED
    return ChecklistStatus.REJECTED


def rollup(sections: Dict[str, Dict[str, Any]]) -> Tuple[int, ChecklistStatus]:
    count = count_non_conformities(sections)
    return count, final_status(count)


def requires_leadership_approval(status: ChecklistStatus) -> bool:
    """A failed inspection can only be filed once leadership has signed it."""
    return status == ChecklistStatus.REJECTED


def parse_inspection_date(value: Any) -> datetime:
    """
    Parse the inspection timestamp.

    Accepts a datetime, the form format `dd/mm/yyyy HH:MM:SS` or ISO-8601.
    Anything else falls back to the current time.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.strptime(text, INSPECTION_DATE_FORMAT)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            pass
    logger.warning("Unparseable inspection date %r, using current time", value)
    return datetime.now(timezone.utc)


def merge_sections(
    current: Dict[str, Dict[str, Any]],
    changes: Optional[Dict[str, Dict[str, Any]]],
) -> Dict[str, Dict[str, Any]]:
    """Replace whole sections present in `changes`, keep the rest."""
    merged = copy.deepcopy(current)
    for key, section in (changes or {}).items():
        merged[key] = section
    return merged


def approval_stats(statuses: List[str], non_conformities: List[int]) -> Dict[str, Any]:
    """
    Aggregate figures for the checklist list screen.

    approved_percentage is rounded half up to a whole number and
    average_non_conformities to one decimal.
    """
    total = len(statuses)
    approved = sum(1 for status in statuses if status == ChecklistStatus.APPROVED.value)
    if total == 0:
        return {
            "total": 0,
            "approved": 0,
            "rejected": 0,
            "approved_percentage": 0,
            "average_non_conformities": 0.0,
        }
    percentage = int(approved * 100 / total + 0.5)
    average = round(sum(non_conformities) / total, 1)
    return {
        "total": total,
        "approved": approved,
        "rejected": total - approved,
        "approved_percentage": percentage,
        "average_non_conformities": average,
    }
