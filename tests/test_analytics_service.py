from datetime import datetime, timezone

from study_buddy.services import analytics_service


def test_default_analytics_shape():
    analytics = analytics_service.default_analytics()

    assert set(analytics["stats"]) == set(analytics_service.STAT_KEYS)
    assert [entry["name"] for entry in analytics["activityData"]] == analytics_service.WEEKDAY_NAMES
    assert all(entry["hours"] == 0 for entry in analytics["activityData"])


def test_normalize_analytics_repairs_bad_values():
    stored = {
        "stats": {"quizCount": 3, "quizScore": "lots", "messagesSent": True},
        "activityData": [{"name": "Wed", "hours": 1.5}, "junk"],
        "subjectData": [{"name": "Biology", "value": 4}, {"value": 1}],
    }

    analytics = analytics_service.normalize_analytics(stored)

    assert analytics["stats"]["quizCount"] == 3
    assert analytics["stats"]["quizScore"] == 0
    assert analytics["stats"]["messagesSent"] == 0
    assert analytics["activityData"][2] == {"name": "Wed", "hours": 1.5}
    assert analytics["subjectData"] == [{"name": "Biology", "value": 4}]


def test_update_helpers_do_not_mutate_input():
    original = analytics_service.default_analytics()

    updated = analytics_service.log_quiz(original, 4, 5)
    updated = analytics_service.log_flashcards(updated, 10)
    updated = analytics_service.log_message(updated)
    updated = analytics_service.add_study_time(updated, 0.25, "Fri")

    assert original == analytics_service.default_analytics()
    stats = updated["stats"]
    assert stats["quizScore"] == 4
    assert stats["quizCount"] == 1
    assert stats["flashcardsGenerated"] == 10
    assert stats["tasksDone"] == 2
    assert stats["messagesSent"] == 1
    assert stats["totalHours"] == 0.25
    assert updated["activityData"][4] == {"name": "Fri", "hours": 0.25}


def test_weekday_name():
    assert analytics_service.weekday_name(datetime(2026, 10, 19, tzinfo=timezone.utc)) == "Mon"
