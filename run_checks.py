from fastapi.testclient import TestClient
from saarthi.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nSTORAGE HEALTH:')
try:
    resp = client.get('/health/storage')
    print(resp.status_code)
    try:
        print(resp.json())
    except Exception:
        print(resp.text)
except Exception as e:
    print('Storage call raised exception:', e)

print('\nREPORTS:')
resp = client.get('/reports', params={'sort_by': 'recent'})
print(resp.status_code, len(resp.json()) if resp.status_code == 200 else resp.text)

print('\nSEED:')
print(client.post('/admin/seed').json())

reports = client.get('/reports', params={'sort_by': 'priority'}).json()
first_id = reports[0]['report']['id']

print('\nVOTE:')
resp = client.post(f'/reports/{first_id}/vote', headers={'X-User-Id': 'smoke-user'})
print(resp.status_code, resp.json().get('report', {}).get('votes'))
resp = client.post(f'/reports/{first_id}/vote', headers={'X-User-Id': 'smoke-user'})
print('repeat vote:', resp.status_code, resp.json())

print('\nOVERDUE SWEEP:')
print(client.post('/admin/overdue-sweep').json())

print('\nNOTICES:')
print([n['title'] for n in client.get('/notices').json()])

print('\nKARMA:')
print(client.get('/karma').json())
