from fastapi.testclient import TestClient
from app.main import app

with TestClient(app) as client:
    print('ROOT:')
    print(client.get('/').text)

    print('\nHEALTH:')
    print(client.get('/health').json())

    print('\nDB HEALTH:')
    resp = client.get('/health/db')
    print(resp.status_code)
    print(resp.json())

    print('\nREPORTS:')
    resp = client.get('/reports')
    print(resp.status_code)
    try:
        print(resp.json())
    except Exception:
        print(resp.text)
