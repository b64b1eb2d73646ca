"""Tests for schedule timelines."""

from __future__ import annotations

from datetime import date

import pytest

from studiodocs.core.errors import InputError
from studiodocs.core.models import Modality, ScheduleRequest, ServiceType
from studiodocs.core.timeline import (
    RULE_TABLE,
    RuleTable,
    add_business_days,
    build_timeline,
)

MONDAY = date(2026, 10, 19)


def _timeline(service, modality=Modality.ONLINE, rooms=1, start=MONDAY):
    request = ScheduleRequest(client="Ana", service_type=service, modality=modality, rooms=rooms, start_date=start)
    return build_timeline(request)


class TestBusinessDays:
    def test_skips_weekend(self):
        friday = date(2026, 10, 23)
        assert add_business_days(friday, 1) == date(2026, 10, 26)

    def test_from_saturday(self):
        assert add_business_days(date(2026, 11, 21), 5) == date(2026, 11, 27)

    def test_zero(self):
        assert add_business_days(MONDAY, 0) == MONDAY


class TestDecorExpress:
    def test_online_dates(self):
        timeline = _timeline(ServiceType.DECOREXPRESS)
        assert [m.date for m in timeline.milestones] == [
            date(2026, 10, 19),
            date(2026, 10, 21),
            date(2026, 10, 26),
            date(2026, 10, 29),
            date(2026, 11, 19),
            date(2026, 11, 21),
            date(2026, 11, 27),
            date(2026, 11, 29),
        ]
        assert timeline.total_days == 41
        assert timeline.final_delivery == "29/11"
        assert timeline.meetings == "3-4"
        assert timeline.label == "DECOR EXPRESS"

    def test_presencial_visit_and_longer_3d(self):
        timeline = _timeline(ServiceType.DECOREXPRESS, Modality.PRESENCIAL)
        visit = timeline.milestones[2]
        assert visit.title == "VISITA TÉCNICA + MEDIÇÃO"
        assert visit.milestone
        assert visit.date == date(2026, 10, 26)
        assert timeline.milestones[4].date == date(2026, 11, 27)
        assert timeline.final_date == date(2026, 12, 6)

    def test_online_measurement_is_not_a_milestone(self):
        assert not _timeline(ServiceType.DECOREXPRESS).milestones[2].milestone


class TestOtherServices:
    def test_projetexpress(self):
        timeline = _timeline(ServiceType.PROJETEXPRESS)
        assert len(timeline.milestones) == 9
        assert timeline.milestones[-1].title == "ENTREGA FINAL COMPLETA"
        assert timeline.meetings == "5+"

    @pytest.mark.parametrize("rooms,expected", [(1, date(2026, 11, 5)), (2, date(2026, 11, 5)),
                                                (3, date(2026, 11, 10)), (10, date(2026, 11, 10))])
    def test_produzexpress_room_threshold(self, rooms, expected):
        assert _timeline(ServiceType.PRODUZEXPRESS, rooms=rooms).final_date == expected

    def test_consultexpress_modality_description(self):
        online = _timeline(ServiceType.CONSULTEXPRESS)
        presencial = _timeline(ServiceType.CONSULTEXPRESS, Modality.PRESENCIAL)
        assert online.milestones[2].description == "Online"
        assert presencial.milestones[2].description == "Presencial"
        assert online.final_date == presencial.final_date == date(2026, 11, 4)
        assert online.total_days == 16


class TestTimeline:
    def test_dates_never_decrease(self):
        for service in ServiceType:
            for modality in Modality:
                dates = [m.date for m in _timeline(service, modality).milestones]
                assert dates == sorted(dates)

    def test_weekday_label(self):
        first = _timeline(ServiceType.DECOREXPRESS).milestones[0]
        assert first.weekday == "SEGUNDA"
        assert first.day_month == "19/10"

    def test_rules_version_recorded(self):
        assert _timeline(ServiceType.CONSULTEXPRESS).rules_version == RULE_TABLE.version

    def test_missing_service_in_table(self):
        table = RuleTable(version="empty", services={})
        request = ScheduleRequest(client="Ana", service_type="decorexpress", start_date=MONDAY)
        with pytest.raises(InputError):
            build_timeline(request, table)
