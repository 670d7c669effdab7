"""
Contract tests for the /api/datavis endpoints.

The FastAPI app runs with the storage and settings dependencies overridden:
reports are served from an InMemoryAnalyticsStore and no database pool is
created (the lifespan is not entered).
"""

from datetime import date
from typing import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from callboard.core.dependencies import get_analytics_store, get_settings_dependency
from callboard.main import app
from callboard.models.enums import EventType
from callboard.tests.conftest import (
    COMPANY_ID,
    GOAL_ID,
    OTHER_COMPANY_ID,
    RANGE_START,
    SCHEMA_ID,
    at,
)


BASE = '/api/datavis'


@pytest.fixture
def store(make_call, make_store):
    """Store with the Morning/Afternoon scenario calls."""
    return make_store(calls=[
        make_call(at(RANGE_START, 500), 600, events=[EventType.SEED]),
        make_call(at(RANGE_START, 700), 300, events=[EventType.SEED]),
        make_call(at(RANGE_START, 900), 900, events=[EventType.SEED, EventType.SALE]),
        make_call(at(date(2024, 5, 2), 600), 599),
    ])


@pytest.fixture
def client(store, test_settings) -> Generator[TestClient, None, None]:
    """TestClient with store and settings dependencies overridden."""
    app.dependency_overrides[get_analytics_store] = lambda: store
    app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def params(**extra):
    query = {'companyId': COMPANY_ID, 'from': '2024-05-01', 'to': '2024-05-07'}
    query.update(extra)
    return query


class TestDailyActivityEndpoint:

    def test_returns_points(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/daily-activity', params=params())

        assert response.status_code == 200
        body = response.json()
        assert body[0] == {'date': '2024-05-01', 'talkTime': 30.0, 'calls': 3, 'seeds': 3}
        assert body[1]['date'] == '2024-05-02'

    def test_missing_company_is_422(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/daily-activity', params={'from': '2024-05-01', 'to': '2024-05-07'}
        )

        assert response.status_code == 422

    def test_inverted_range_is_400(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/daily-activity', params=params(**{'from': '2024-05-07', 'to': '2024-05-01'})
        )

        assert response.status_code == 400

    def test_store_failure_is_500(self, client: TestClient, store) -> None:
        store.grouped_call_sums = AsyncMock(side_effect=RuntimeError('connection reset'))

        response = client.get(f'{BASE}/daily-activity', params=params())

        assert response.status_code == 500
        assert 'connection reset' not in response.json()['detail']


class TestBlockPerformanceEndpoints:

    def test_block_performance(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance', params=params(schemaId=SCHEMA_ID)
        )

        assert response.status_code == 200
        body = response.json()
        assert [(b['blockName'], b['talkTime'], b['seeds'], b['sales']) for b in body] == [
            ('Morning', 15, 2, 0),
            ('Afternoon', 15, 1, 1),
        ]

    def test_unknown_schema_is_404(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/block-performance', params=params(schemaId=999))

        assert response.status_code == 404

    def test_other_tenant_schema_is_404(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance',
            params=params(companyId=OTHER_COMPANY_ID, schemaId=SCHEMA_ID),
        )

        assert response.status_code == 404

    def test_range_over_limit_is_400(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance',
            params=params(schemaId=SCHEMA_ID, to='2024-06-01'),
        )

        assert response.status_code == 400
        assert '31 days' in response.json()['detail']

    def test_range_of_exactly_limit_is_accepted(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance',
            params=params(schemaId=SCHEMA_ID, to='2024-05-31'),
        )

        assert response.status_code == 200

    def test_filtered(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance-filtered',
            params=params(schemaId=SCHEMA_ID, fromDayIndex=0, toDayIndex=0),
        )

        assert response.status_code == 200
        assert [b['talkTime'] for b in response.json()] == [15.0, 15.0]

    def test_filtered_to_index_beyond_range_is_400(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance-filtered',
            params=params(schemaId=SCHEMA_ID, fromDayIndex=0, toDayIndex=7),
        )

        assert response.status_code == 400

    def test_filtered_inverted_indices_is_400(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance-filtered',
            params=params(schemaId=SCHEMA_ID, fromDayIndex=3, toDayIndex=1),
        )

        assert response.status_code == 400

    def test_filtered_no_schema_days_is_404(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/block-performance-filtered',
            params=params(schemaId=SCHEMA_ID, fromDayIndex=2, toDayIndex=3),
        )

        assert response.status_code == 404


class TestDistributionEndpoints:

    def test_long_call_distribution_omits_empty_bins(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/long-call-distribution', params=params())

        assert response.status_code == 200
        assert response.json() == [
            {'range': '5-10 min', 'count': 2},
            {'range': '10+ min', 'count': 2},
        ]

    def test_long_call_distribution_include_empty(self, client: TestClient) -> None:
        response = client.get(
            f'{BASE}/long-call-distribution', params=params(includeEmpty='true')
        )

        assert [b['count'] for b in response.json()] == [0, 0, 0, 2, 2]

    def test_conversion_funnel(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/conversion-funnel', params=params())

        assert response.status_code == 200
        assert response.json() == [
            {'name': 'Seeds', 'value': 3},
            {'name': 'Callbacks', 'value': 0},
            {'name': 'Leads', 'value': 0},
            {'name': 'Sales', 'value': 1},
        ]

    def test_seed_timeline_heatmap(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/seed-timeline-heatmap', params=params())

        assert response.status_code == 200
        body = response.json()
        assert [p['date'] for p in body] == ['2024-05-01', '2024-05-02']
        assert body[0] == {'date': '2024-05-01', 'intensity': 4, 'seeds': 3, 'talkTime': 30}
        assert body[1]['intensity'] == 0


class TestConsistencyEndpoint:

    def test_consistency_streak(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/consistency-streak', params=params(goalId=GOAL_ID))

        assert response.status_code == 200
        body = response.json()
        # seeds 3/4 -> 75, sales 1/10 -> 10, mean 42.5 -> 43
        assert body[0] == {'day': '01', 'date': '2024-05-01', 'score': 43}
        assert body[1] == {'day': '02', 'date': '2024-05-02', 'score': 0}

    def test_unknown_goal_is_404(self, client: TestClient) -> None:
        response = client.get(f'{BASE}/consistency-streak', params=params(goalId=999))

        assert response.status_code == 404


class TestServiceEndpoints:

    def test_health(self, client: TestClient) -> None:
        assert client.get('/health').json() == {'status': 'healthy'}

    def test_root(self, client: TestClient) -> None:
        assert client.get('/').json()['name'] == 'Callboard API'
