"""Tests for settings routes."""
import json


def send_json(client, method, url, payload):
    return client.open(url, method=method, data=json.dumps(payload), content_type='application/json')


class TestMachineRoutes:
    """Tests for /settings/machine."""

    def test_get_machine(self, client, machine_profile):
        response = client.get('/settings/machine')

        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert data['name'] == 'Test Coater'
        assert data['coatingSettings']['safeHeight'] == 80

    def test_update_machine(self, client, machine_profile):
        response = send_json(client, 'PUT', '/settings/machine', {'coatingSettings': {'coatingHeight': 15}})

        assert response.status_code == 200
        assert json.loads(response.data)['data']['coatingSettings']['coatingHeight'] == 15

    def test_update_machine_bad_value(self, client, machine_profile):
        response = send_json(client, 'PUT', '/settings/machine', {'coatingSettings': {'safeHeight': 'tall'}})

        assert response.status_code == 400
        assert json.loads(response.data)['message'].startswith('Invalid machine settings')

    def test_update_machine_no_data(self, client):
        assert send_json(client, 'PUT', '/settings/machine', {}).status_code == 400


class TestSnippetRoutes:
    """Tests for /settings/snippets."""

    def test_list(self, client, sample_snippets):
        data = json.loads(client.get('/settings/snippets').data)
        assert sorted(s['id'] for s in data['data']) == ['footer', 'header']

    def test_create(self, client):
        response = send_json(client, 'POST', '/settings/snippets',
                             {'name': 'Purge', 'hook': 'beforePath', 'template': 'G4 P1'})

        assert response.status_code == 200
        assert json.loads(response.data)['data']['hook'] == 'beforePath'

    def test_create_invalid(self, client):
        response = send_json(client, 'POST', '/settings/snippets', {'hook': 'later'})

        assert response.status_code == 400
        message = json.loads(response.data)['message']
        assert 'Snippet name is required' in message
        assert 'Hook must be one of' in message

    def test_update(self, client, sample_snippets):
        response = send_json(client, 'PUT', '/settings/snippets/footer', {'template': 'M5'})
        assert json.loads(response.data)['data']['template'] == 'M5'

    def test_update_not_found(self, client):
        assert send_json(client, 'PUT', '/settings/snippets/missing', {'order': 1}).status_code == 404

    def test_delete(self, client, sample_snippets):
        assert client.delete('/settings/snippets/header').status_code == 200
        assert client.delete('/settings/snippets/header').status_code == 404
