import pytest

from study_buddy.services import planner_service


def test_build_study_session_computes_end():
    session = planner_service.build_study_session({
        "title": "Organic chemistry",
        "date": "2026-10-20T14:00:00Z",
        "duration": 90,
        "color": "#10B981",
    })

    assert session == {
        "title": "Organic chemistry",
        "start": "2026-10-20T14:00:00+00:00",
        "end": "2026-10-20T15:30:00+00:00",
        "duration": 90,
        "color": "#10b981",
    }


def test_build_study_session_defaults():
    session = planner_service.build_study_session({"title": "Review", "date": "2026-10-20T09:00:00", "color": "red"})

    assert session["duration"] == 60
    assert session["end"] == "2026-10-20T10:00:00+00:00"
    assert session["color"] == planner_service.DEFAULT_SESSION_COLOR


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"date": "2026-10-20T09:00:00"},
        {"title": "Review"},
        {"title": "Review", "date": "tomorrow"},
        {"title": "Review", "date": "2026-10-20T09:00:00", "duration": 2},
        {"title": "Review", "date": "2026-10-20T09:00:00", "duration": "long"},
    ],
)
def test_build_study_session_rejects_invalid_payloads(payload):
    with pytest.raises(planner_service.SessionValidationError):
        planner_service.build_study_session(payload)
