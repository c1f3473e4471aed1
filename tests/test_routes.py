from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError


def _criar(client, **campos):
    payload = {
        'Titulo': 'Buy milk',
        'Descricao': 'Integral',
        'Data': '2024-01-01T00:00:00',
        'Status': 0,
    }
    payload.update(campos)
    return client.post('/Tarefa', json=payload)


def test_create_get_delete_scenario(client):
    resp = _criar(client, Descricao=None)
    assert resp.status_code == 201
    created = resp.get_json()
    tarefa_id = created['Id']
    assert isinstance(tarefa_id, int)
    assert resp.headers['Location'].endswith(f'/Tarefa/{tarefa_id}')

    resp = client.get(f'/Tarefa/{tarefa_id}')
    assert resp.status_code == 200
    assert resp.get_json() == {
        'Id': tarefa_id,
        'Titulo': 'Buy milk',
        'Descricao': None,
        'Data': '2024-01-01T00:00:00',
        'Status': 0,
    }

    resp = client.delete(f'/Tarefa/{tarefa_id}')
    assert resp.status_code == 204
    assert resp.data == b''

    resp = client.get(f'/Tarefa/{tarefa_id}')
    assert resp.status_code == 404
    assert resp.data == b''


def test_create_with_empty_date_is_rejected(client):
    resp = _criar(client, Data='0001-01-01T00:00:00')
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa não pode ser vazia'}

    resp = _criar(client, Data=None)
    assert resp.status_code == 400

    resp = client.post('/Tarefa', json={'Titulo': 'Sem data'})
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa não pode ser vazia'}

    assert client.get('/Tarefa/ObterTodos').get_json() == []


def test_create_with_null_or_malformed_body(client):
    resp = client.post('/Tarefa', data='null', content_type='application/json')
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A tarefa não pode ser nula'}

    resp = client.post('/Tarefa', data='{not json', content_type='application/json')
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A tarefa não pode ser nula'}

    resp = client.post('/Tarefa', data='texto')
    assert resp.status_code == 400


def test_create_rejects_invalid_fields(client):
    resp = _criar(client, Data='amanha')
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa é inválida'}

    resp = _criar(client, Status=7)
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'O status da tarefa é inválido'}

    resp = _criar(client, Titulo=['lista'])
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'O campo Titulo deve ser um texto'}

    assert client.get('/Tarefa/ObterTodos').get_json() == []


def test_create_accepts_case_insensitive_fields_and_status_name(client):
    resp = client.post(
        '/Tarefa',
        json={'titulo': 'Relatorio', 'data': '2024-03-10', 'status': 'Finalizado', 'Id': 999},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['Titulo'] == 'Relatorio'
    assert body['Data'] == '2024-03-10T00:00:00'
    assert body['Status'] == 1
    assert body['Id'] != 999


def test_create_defaults_status_and_normalizes_timezone(client):
    resp = client.post('/Tarefa', json={'Titulo': 'Reuniao', 'Data': '2024-01-01T03:00:00-03:00'})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['Status'] == 0
    assert body['Data'] == '2024-01-01T06:00:00'


def test_update_overwrites_fields_and_keeps_id(client):
    tarefa_id = _criar(client).get_json()['Id']

    resp = client.put(
        f'/Tarefa/{tarefa_id}',
        json={'Id': 42, 'Titulo': 'Buy bread', 'Descricao': None, 'Data': '2024-02-02T10:30:00', 'Status': 1},
    )
    assert resp.status_code == 200
    assert resp.get_json() == {
        'Id': tarefa_id,
        'Titulo': 'Buy bread',
        'Descricao': None,
        'Data': '2024-02-02T10:30:00',
        'Status': 1,
    }
    assert client.get(f'/Tarefa/{tarefa_id}').get_json()['Titulo'] == 'Buy bread'
    assert client.get('/Tarefa/42').status_code == 404


def test_update_missing_task_returns_404_and_creates_nothing(client):
    resp = client.put('/Tarefa/123', json={'Titulo': 'x', 'Data': '2024-01-01T00:00:00', 'Status': 0})
    assert resp.status_code == 404
    assert resp.data == b''

    # id inexistente tem precedencia sobre corpo invalido
    resp = client.put('/Tarefa/123', data='null', content_type='application/json')
    assert resp.status_code == 404

    assert client.get('/Tarefa/ObterTodos').get_json() == []


def test_update_with_invalid_payload_keeps_record(client):
    tarefa_id = _criar(client).get_json()['Id']

    resp = client.put(f'/Tarefa/{tarefa_id}', json={'Titulo': 'Novo', 'Data': '0001-01-01T00:00:00'})
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa não pode ser vazia'}

    resp = client.put(f'/Tarefa/{tarefa_id}', data='null', content_type='application/json')
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A tarefa não pode ser nula'}

    assert client.get(f'/Tarefa/{tarefa_id}').get_json()['Titulo'] == 'Buy milk'


def test_delete_missing_task_returns_404(client):
    resp = client.delete('/Tarefa/77')
    assert resp.status_code == 404


def test_obter_todos(client):
    assert client.get('/Tarefa/ObterTodos').get_json() == []

    ids = [_criar(client, Titulo=titulo).get_json()['Id'] for titulo in ('A', 'B', 'C')]

    resp = client.get('/Tarefa/ObterTodos')
    assert resp.status_code == 200
    assert [t['Id'] for t in resp.get_json()] == ids


def test_obter_por_titulo(client):
    _criar(client, Titulo='Buy milk')
    _criar(client, Titulo='Sell MILK')
    _criar(client, Titulo='100% done')
    _criar(client, Titulo='Walk the dog')

    resp = client.get('/Tarefa/ObterPorTitulo', query_string={'titulo': 'milk'})
    assert resp.status_code == 200
    assert sorted(t['Titulo'] for t in resp.get_json()) == ['Buy milk', 'Sell MILK']

    resp = client.get('/Tarefa/ObterPorTitulo', query_string={'titulo': '%'})
    assert [t['Titulo'] for t in resp.get_json()] == ['100% done']

    resp = client.get('/Tarefa/ObterPorTitulo', query_string={'titulo': 'nada'})
    assert resp.get_json() == []

    resp = client.get('/Tarefa/ObterPorTitulo')
    assert len(resp.get_json()) == 4


def test_obter_por_data_ignores_time_of_day(client):
    manha = _criar(client, Data='2024-01-01T08:00:00').get_json()['Id']
    noite = _criar(client, Data='2024-01-01T23:59:59').get_json()['Id']
    _criar(client, Data='2024-01-02T00:00:00')
    _criar(client, Data='2023-12-31T23:59:59')

    resp = client.get('/Tarefa/ObterPorData', query_string={'data': '2024-01-01'})
    assert resp.status_code == 200
    assert [t['Id'] for t in resp.get_json()] == [manha, noite]

    resp = client.get('/Tarefa/ObterPorData', query_string={'data': '2024-01-01T15:00:00'})
    assert [t['Id'] for t in resp.get_json()] == [manha, noite]

    resp = client.get('/Tarefa/ObterPorData')
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_obter_por_data_invalid_date(client):
    resp = client.get('/Tarefa/ObterPorData', query_string={'data': '31/12/2024'})
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa é inválida'}


def test_obter_por_status_partitions_all_tasks(client):
    _criar(client, Titulo='a', Status=0)
    _criar(client, Titulo='b', Status=1)
    _criar(client, Titulo='c', Status=0)
    _criar(client, Titulo='d', Status='FINALIZADO')

    todos = client.get('/Tarefa/ObterTodos').get_json()
    pendentes = client.get('/Tarefa/ObterPorStatus', query_string={'status': 0}).get_json()
    finalizados = client.get('/Tarefa/ObterPorStatus', query_string={'status': 'Finalizado'}).get_json()

    assert all(t['Status'] == 0 for t in pendentes)
    assert all(t['Status'] == 1 for t in finalizados)
    assert [t['Titulo'] for t in pendentes] == ['a', 'c']
    assert sorted(t['Id'] for t in pendentes + finalizados) == sorted(t['Id'] for t in todos)

    # sem parametro: PENDENTE
    resp = client.get('/Tarefa/ObterPorStatus')
    assert [t['Titulo'] for t in resp.get_json()] == ['a', 'c']


def test_obter_por_status_invalid(client):
    resp = client.get('/Tarefa/ObterPorStatus', query_string={'status': '99'})
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'O status da tarefa é inválido'}

    resp = client.get('/Tarefa/ObterPorStatus', query_string={'status': 'arquivado'})
    assert resp.status_code == 400


def test_database_error_returns_500(client):
    with patch(
        'organizador.controllers.routes.blueprints.tarefas.TarefaStore.inserir',
        side_effect=SQLAlchemyError('falha'),
    ):
        resp = _criar(client)
    assert resp.status_code == 500
    assert resp.get_json() == {'Erro': 'Erro ao acessar o banco de dados'}


def test_method_not_allowed(client):
    resp = client.patch('/Tarefa/1', json={})
    assert resp.status_code == 405
    assert resp.get_json() == {'Erro': 'Método não permitido'}


def test_health_and_request_id(client):
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'healthy'
    assert resp.headers.get('X-Request-ID')

    resp = client.get('/Tarefa/ObterTodos', headers={'X-Request-ID': 'abc123'})
    assert resp.headers['X-Request-ID'] == 'abc123'


def test_dates_outside_range_after_utc_conversion(client):
    resp = _criar(client, Data='0001-01-01T00:30:00+01:00')
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa é inválida'}

    tarefa_id = _criar(client).get_json()['Id']
    resp = client.put(f'/Tarefa/{tarefa_id}', json={'Titulo': 'x', 'Data': '9999-12-31T23:00:00-05:00'})
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa é inválida'}

    resp = client.get('/Tarefa/ObterPorData', query_string={'data': '9999-12-31T23:00:00-05:00'})
    assert resp.status_code == 400
    assert resp.get_json() == {'Erro': 'A data da tarefa é inválida'}


def test_oversized_id_is_not_found(client):
    id_enorme = '99999999999999999999'

    resp = client.get(f'/Tarefa/{id_enorme}')
    assert resp.status_code == 404
    assert resp.data == b''

    resp = client.put(f'/Tarefa/{id_enorme}', json={'Titulo': 'x', 'Data': '2024-01-01T00:00:00'})
    assert resp.status_code == 404

    resp = client.delete(f'/Tarefa/{id_enorme}')
    assert resp.status_code == 404

    assert client.get('/Tarefa/ObterTodos').get_json() == []


def test_long_title_is_stored_unchanged(client):
    titulo = 'tarefa longa ' * 500
    resp = _criar(client, Titulo=titulo)
    assert resp.status_code == 201

    tarefa_id = resp.get_json()['Id']
    assert client.get(f'/Tarefa/{tarefa_id}').get_json()['Titulo'] == titulo


def test_create_accepts_trailing_slash(client):
    resp = client.post('/Tarefa/', json={'Titulo': 'Barra', 'Data': '2024-01-01T00:00:00'})
    assert resp.status_code == 201
    assert resp.headers['Location'].endswith(f"/Tarefa/{resp.get_json()['Id']}")


def test_health_failure_hides_driver_details(client):
    with patch(
        'organizador.controllers.routes.blueprints.health.text',
        side_effect=SQLAlchemyError('host=db.interno usuario=admin'),
    ):
        resp = client.get('/health')
    assert resp.status_code == 503
    body = resp.get_json()
    assert body['status'] == 'unhealthy'
    assert body['checks']['database']['message'] == 'Database connection failed'
    assert 'db.interno' not in resp.get_data(as_text=True)


def test_app_does_not_configure_unused_secret_key():
    from organizador import app

    assert app.config.get('SECRET_KEY') is None
