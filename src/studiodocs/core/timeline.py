"""Delivery-schedule timelines derived from a versioned rule table.

Each service type is an ordered list of steps. A step's date is the
previous step's date plus a calendar- or business-day offset; some
offsets, titles and key-event flags depend on the project modality or
on the number of rooms. The table is data, so thresholds can be
amended and tested without touching the renderers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Optional

from .errors import InputError
from .formatting import format_day_month, weekday_label
from .models import Modality, ScheduleRequest, ServiceType


# ---------------------------------------------------------------------------
# Date arithmetic
# ---------------------------------------------------------------------------

def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def add_business_days(start: date, days: int) -> date:
    """Advance *days* weekdays, skipping Saturday and Sunday."""
    current = start
    added = 0
    while added < days:
        current += timedelta(days=1)
        if current.weekday() < 5:
            added += 1
    return current


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Offset:
    days: int = 0
    business: bool = False

    def apply(self, start: date) -> date:
        return add_business_days(start, self.days) if self.business else add_days(start, self.days)


@dataclass(frozen=True)
class StepVariant:
    """Overrides applied to a step under a given condition."""
    offset: Optional[Offset] = None
    title: Optional[str] = None
    description: Optional[str] = None
    milestone: Optional[bool] = None


@dataclass(frozen=True)
class StepRule:
    title: str
    description: str
    offset: Offset = Offset()
    milestone: bool = False
    by_modality: dict[Modality, StepVariant] = field(default_factory=dict)
    #: ``(min_rooms, variant)``: applied when the project has at least that many rooms
    room_threshold: Optional[tuple[int, StepVariant]] = None

    def resolve(self, modality: Modality, rooms: int) -> "StepRule":
        """This step with the matching variants folded in."""
        step = self
        variants = []
        if modality in self.by_modality:
            variants.append(self.by_modality[modality])
        if self.room_threshold and rooms >= self.room_threshold[0]:
            variants.append(self.room_threshold[1])
        for v in variants:
            step = replace(
                step,
                offset=v.offset or step.offset,
                title=v.title or step.title,
                description=v.description or step.description,
                milestone=step.milestone if v.milestone is None else v.milestone,
            )
        return step


@dataclass(frozen=True)
class ServiceRules:
    label: str
    meetings: str
    steps: tuple[StepRule, ...]


@dataclass(frozen=True)
class RuleTable:
    version: str
    services: dict[ServiceType, ServiceRules]

    def rules_for(self, service: ServiceType) -> ServiceRules:
        try:
            return self.services[service]
        except KeyError:
            raise InputError(f"No schedule rules for {service.value!r} in table {self.version}") from None


_QUESTIONNAIRE = StepRule(
    "PRAZO: QUESTIONÁRIO PRÉ-BRIEFING",
    "Envio do formulário preenchido",
    Offset(2, business=True),
)

RULE_TABLE = RuleTable(
    version="2024.1",
    services={
        ServiceType.DECOREXPRESS: ServiceRules(
            label="DECOR EXPRESS",
            meetings="3-4",
            steps=(
                StepRule("INÍCIO DO PROJETO", "Pagamento confirmado", milestone=True),
                _QUESTIONNAIRE,
                StepRule(
                    "PRAZO: ENVIO DAS MEDIDAS",
                    "Cliente envia medidas",
                    Offset(3, business=True),
                    by_modality={
                        Modality.PRESENCIAL: StepVariant(
                            offset=Offset(5),
                            title="VISITA TÉCNICA + MEDIÇÃO",
                            description="Presencial no local",
                            milestone=True,
                        ),
                    },
                ),
                StepRule("REUNIÃO DE BRIEFING", "Alinhamento de expectativas", Offset(3), milestone=True),
                StepRule(
                    "PROJETO 3D PRONTO",
                    "Desenvolvimento concluído",
                    Offset(15, business=True),
                    milestone=True,
                    by_modality={Modality.PRESENCIAL: StepVariant(offset=Offset(21, business=True))},
                ),
                StepRule("REUNIÃO DE APRESENTAÇÃO", "Apresentação do projeto 3D", Offset(2)),
                StepRule("PRAZO: AJUSTES", "Até 2 rodadas inclusos", Offset(5, business=True)),
                StepRule("ENTREGA FINAL", "Projeto + Manual + Lista de Compras", Offset(2), milestone=True),
            ),
        ),
        ServiceType.PROJETEXPRESS: ServiceRules(
            label="PROJET EXPRESS",
            meetings="5+",
            steps=(
                StepRule("INÍCIO DO PROJETO", "Pagamento confirmado", milestone=True),
                _QUESTIONNAIRE,
                StepRule("VISITA TÉCNICA + MEDIÇÃO", "Presencial no local", Offset(5), milestone=True),
                StepRule("REUNIÃO DE BRIEFING", "Alinhamento completo", Offset(3), milestone=True),
                StepRule("PROJETO 3D PRONTO", "Desenvolvimento concluído", Offset(28, business=True), milestone=True),
                StepRule("REUNIÃO DE APRESENTAÇÃO 3D", "Apresentação e aprovação", Offset(2)),
                StepRule(
                    "PROJETO EXECUTIVO PRONTO",
                    "Todos os técnicos finalizados",
                    Offset(25, business=True),
                    milestone=True,
                ),
                StepRule("REUNIÃO DE ENTREGA EXECUTIVO", "Orientações para obra", Offset(2)),
                StepRule("ENTREGA FINAL COMPLETA", "3D + Executivo + Manual + ART", Offset(5), milestone=True),
            ),
        ),
        ServiceType.PRODUZEXPRESS: ServiceRules(
            label="PRODUZ EXPRESS",
            meetings="1-2",
            steps=(
                StepRule("INÍCIO DO SERVIÇO", "Pagamento confirmado", milestone=True),
                _QUESTIONNAIRE,
                StepRule("REUNIÃO DE BRIEFING", "Alinhamento do que será feito", Offset(5), milestone=True),
                StepRule(
                    "DIA DE PRODUÇÃO",
                    "Ambiente finalizado!",
                    Offset(10),
                    milestone=True,
                    room_threshold=(3, StepVariant(offset=Offset(15))),
                ),
            ),
        ),
        ServiceType.CONSULTEXPRESS: ServiceRules(
            label="CONSULT EXPRESS",
            meetings="1",
            steps=(
                StepRule("INÍCIO DA CONSULTORIA", "Pagamento confirmado", milestone=True),
                _QUESTIONNAIRE,
                StepRule(
                    "REUNIÃO DE CONSULTORIA",
                    "Online",
                    Offset(7),
                    milestone=True,
                    by_modality={Modality.PRESENCIAL: StepVariant(description="Presencial")},
                ),
                StepRule("ENTREGA DO MATERIAL", "Material adicional (se contratado)", Offset(7), milestone=True),
            ),
        ),
    },
)


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Milestone:
    """A dated timeline entry; ``milestone`` marks key events."""

    date: date
    title: str
    description: str
    milestone: bool = False

    @property
    def day_month(self) -> str:
        return format_day_month(self.date)

    @property
    def weekday(self) -> str:
        return weekday_label(self.date)


@dataclass(frozen=True)
class Timeline:
    service_type: ServiceType
    label: str
    meetings: str
    milestones: tuple[Milestone, ...]
    rules_version: str

    @property
    def total_days(self) -> int:
        if not self.milestones:
            return 0
        return (self.milestones[-1].date - self.milestones[0].date).days

    @property
    def final_date(self) -> Optional[date]:
        return self.milestones[-1].date if self.milestones else None

    @property
    def final_delivery(self) -> str:
        return self.milestones[-1].day_month if self.milestones else ""


def build_timeline(request: ScheduleRequest, table: RuleTable = RULE_TABLE) -> Timeline:
    """Derive every milestone date for *request* from *table*."""
    rules = table.rules_for(request.service_type)
    milestones = []
    current = request.start_date
    for rule in rules.steps:
        step = rule.resolve(request.modality, request.rooms)
        current = step.offset.apply(current)
        milestones.append(Milestone(current, step.title, step.description, step.milestone))
    return Timeline(
        service_type=request.service_type,
        label=rules.label,
        meetings=rules.meetings,
        milestones=tuple(milestones),
        rules_version=table.version,
    )
