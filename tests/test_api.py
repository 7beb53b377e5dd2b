"""
Tests for the Flask REST API.
"""

import pytest
import sys
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from api import create_app
from tourism_analytics.data.provider import DataProvider


@pytest.fixture
def client(sample_dataset):
    app = create_app(DataProvider.from_dataset(sample_dataset))
    app.config['TESTING'] = True
    return app.test_client()


class TestEndpoints:
    def test_index(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert 'GET /api/overview' in response.get_json()['endpoints']

    def test_health_reports_lazy_load(self, client):
        assert client.get('/health').get_json()['data_loaded'] is False
        client.get('/api/overview')
        assert client.get('/health').get_json()['data_loaded'] is True

    @pytest.mark.parametrize("path", [
        '/api/overview', '/api/spending-breakdown', '/api/clustering', '/api/cohort',
        '/api/regression', '/api/nationality', '/api/timeseries', '/api/diagnostics',
        '/api/vendor/accommodation', '/api/vendor/attractions', '/api/vendor/food',
        '/api/vendor/shopping', '/api/vendor/transport',
    ])
    def test_analytics_endpoints(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert response.is_json

    def test_overview_payload(self, client):
        data = client.get('/api/overview').get_json()
        assert data['total_tourists'] == 200
        assert isinstance(data['avg_spending'], int)

    def test_nationality_detail(self, client):
        response = client.get('/api/nationality/chinese')
        assert response.status_code == 200
        assert response.get_json()['nationality'] == 'Chinese'


class TestErrors:
    def test_unknown_nationality(self, client):
        response = client.get('/api/nationality/Atlantean')
        assert response.status_code == 404
        assert 'Atlantean' in response.get_json()['error']

    def test_unknown_vendor_category(self, client):
        response = client.get('/api/vendor/nightlife')
        assert response.status_code == 404

    def test_unknown_route(self, client):
        response = client.get('/api/does-not-exist')
        assert response.status_code == 404
        assert 'error' in response.get_json()

    def test_missing_data_is_unavailable(self, tmp_path):
        client = create_app(DataProvider(data_dir=tmp_path)).test_client()
        response = client.get('/api/overview')
        assert response.status_code == 503
        assert 'not found' in response.get_json()['error']
