from datetime import date


def _new_job(container, **kwargs):
    data = {
        'customer_name': 'Sofía Díaz',
        'product_name': 'Laptop',
        'issue_description': 'No enciende',
    }
    data.update(kwargs)
    result = container.maintenance_service.add_job(**data)
    assert result['ok'], result.get('error')
    return result['job']


def test_add_job_defaults(container):
    job = _new_job(container)
    assert job['id'].startswith('M-')
    assert job['status'] == 'Received'
    assert job['cost'] == 0.0
    assert job['dateReceived'] == date.today().isoformat()
    assert 'completionDate' not in job
    assert container.maintenance_service.get_all_jobs()[0]['id'] == job['id']


def test_add_job_requires_fields(container):
    result = container.maintenance_service.add_job('', 'Laptop', 'No enciende')
    assert not result['ok']


def test_completion_date_stamped_once(container):
    service = container.maintenance_service
    job = _new_job(container)

    done = service.update_job(job['id'], {'status': 'Completed', 'cost': 25})
    assert done['ok']
    assert done['job']['completionDate'] == date.today().isoformat()
    assert done['job']['cost'] == 25.0

    # fecha anterior guardada: nunca se sobreescribe
    stored = service.get_job(job['id'])
    stored['completionDate'] = '2024-01-01'
    container.maintenance_repo.update_job(job['id'], stored)

    back = service.update_job(job['id'], {'status': 'In Progress'})
    assert back['job']['completionDate'] == '2024-01-01'

    again = service.update_job(job['id'], {'status': 'Awaiting Collection'})
    assert again['job']['completionDate'] == '2024-01-01'


def test_update_without_status_does_not_stamp(container):
    job = _new_job(container)
    result = container.maintenance_service.update_job(job['id'], {'notes': 'Falta cargador'})
    assert result['ok']
    assert result['job']['notes'] == 'Falta cargador'
    assert 'completionDate' not in result['job']


def test_update_job_validation(container):
    service = container.maintenance_service
    job = _new_job(container)
    assert not service.update_job(job['id'], {'status': 'Lost'})['ok']
    assert not service.update_job(job['id'], {'cost': -1})['ok']
    assert not service.update_job(job['id'], {'customerName': '  '})['ok']
    assert service.update_job('M-nada', {'status': 'Completed'})['not_found']
    assert service.get_job(job['id'])['status'] == 'Received'


def test_status_change_logged(container):
    job = _new_job(container)
    container.maintenance_service.update_job(job['id'], {'status': 'In Progress'})
    logs = container.audit_service.get_logs('SERVICIO', job['id'])
    assert logs[0]['details'] == {'from': 'Received', 'to': 'In Progress'}


def test_jobs_by_date_and_partitions(container):
    service = container.maintenance_service
    open_job = _new_job(container)
    done_job = _new_job(container, customer_name='Raúl')
    service.update_job(done_job['id'], {'status': 'Awaiting Collection'})

    today = date.today()
    assert {j['id'] for j in service.jobs_by_date(today)} == {open_job['id'], done_job['id']}
    assert [j['id'] for j in service.open_jobs(today)] == [open_job['id']]
    assert [j['id'] for j in service.finished_jobs(today)] == [done_job['id']]

    # M-1 por defecto se recibió el 2024-06-18
    assert [j['id'] for j in service.jobs_by_date('2024-06-18')] == ['M-1']
    assert len(service.jobs_by_date()) == 3


def test_completed_again_after_reopen_keeps_date(container):
    service = container.maintenance_service
    job = _new_job(container)
    stamped = service.update_job(job['id'], {'status': 'Completed'})['job']['completionDate']
    service.update_job(job['id'], {'status': 'In Progress'})
    final = service.update_job(job['id'], {'status': 'Completed'})['job']
    assert final['completionDate'] == stamped


def test_non_text_and_non_finite_fields_rejected(container):
    service = container.maintenance_service
    assert not service.add_job(123, 'Laptop', 'No enciende')['ok']
    assert not service.add_job('Sofía', 'Laptop', 'No enciende', notes=5)['ok']

    job = _new_job(container)
    assert not service.update_job(job['id'], {'productName': 42})['ok']
    assert not service.update_job(job['id'], {'notes': ['x']})['ok']
    assert not service.update_job(job['id'], {'cost': float('nan')})['ok']
    assert not service.update_job(job['id'], {'cost': float('inf')})['ok']

    stored = service.get_job(job['id'])
    assert stored['productName'] == 'Laptop'
    assert stored['cost'] == 0.0
