from datetime import date, timedelta

from app_pos.services import is_overdue


def _new_debt(container, total=100, due=None):
    due = due or (date.today() + timedelta(days=15)).isoformat()
    result = container.receivables_service.add_receivable('Carla Ruiz', total, due)
    assert result['ok'], result.get('error')
    return result['receivable']


def test_partial_then_full_payment(container):
    service = container.receivables_service
    debt = _new_debt(container)

    first = service.add_payment(debt['id'], 40)
    assert first['ok']
    assert first['status'] == 'Partially Paid'
    assert first['receivable']['amountPaid'] == 40.0
    assert first['status_changed']

    second = service.add_payment(debt['id'], 60)
    assert second['ok']
    assert second['status'] == 'Paid'
    assert second['balance'] == 0.0

    extra = service.add_payment(debt['id'], 1)
    assert not extra['ok']
    assert service.get_receivable(debt['id'])['amountPaid'] == 100.0


def test_overpayment_rejected(container):
    debt = _new_debt(container)
    result = container.receivables_service.add_payment(debt['id'], 100.01)
    assert not result['ok']
    assert result['balance'] == 100.0
    assert container.receivables_service.get_receivable(debt['id'])['status'] == 'Unpaid'


def test_non_positive_payment_rejected(container):
    debt = _new_debt(container)
    assert not container.receivables_service.add_payment(debt['id'], 0)['ok']
    assert not container.receivables_service.add_payment(debt['id'], -5)['ok']
    assert not container.receivables_service.add_payment(debt['id'], 'abc')['ok']


def test_payment_unknown_receivable(container):
    result = container.receivables_service.add_payment('R-nada', 10)
    assert not result['ok']
    assert result['not_found']


def test_add_receivable_validation(container):
    service = container.receivables_service
    due = date.today().isoformat()
    assert not service.add_receivable('', 10, due)['ok']
    assert not service.add_receivable('Carla', 0, due)['ok']
    assert not service.add_receivable('Carla', 10, None)['ok']
    assert not service.add_receivable('Carla', 10, 'mañana')['ok']


def test_payment_logged_in_activity(container):
    debt = _new_debt(container)
    container.receivables_service.add_payment(debt['id'], 25)
    logs = container.audit_service.get_logs('PAGO', debt['id'])
    assert len(logs) == 1
    assert logs[0]['details']['amount'] == 25.0


def test_status_recomputed_from_amounts(container):
    stored = {
        'id': 'R-9', 'customerName': 'X', 'totalAmount': 50, 'amountPaid': 50,
        'issueDate': '', 'dueDate': '2024-01-01', 'status': 'Unpaid',
    }
    container.receivable_repo.create_receivable(stored)
    assert container.receivables_service.filter_receivables('paid', 'X')[0]['id'] == 'R-9'
    assert not is_overdue(stored, date(2025, 1, 1))


def test_is_overdue():
    debt = {'totalAmount': 10, 'amountPaid': 0, 'dueDate': '2024-07-10T00:00:00+00:00'}
    assert is_overdue(debt, date(2024, 7, 11))
    assert not is_overdue(debt, date(2024, 7, 10))
    assert not is_overdue(dict(debt, amountPaid=10), date(2024, 7, 11))


def test_overdue_receivables(container):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    late = _new_debt(container, due=yesterday)
    _new_debt(container)

    overdue_ids = [r['id'] for r in container.receivables_service.overdue_receivables()]
    assert late['id'] in overdue_ids
    # el R-1 por defecto venció en 2024 y sigue con saldo
    assert 'R-1' in overdue_ids
    assert len(overdue_ids) == 2


def test_filter_receivables_tabs_and_search(container):
    service = container.receivables_service
    debt = _new_debt(container)
    service.add_payment(debt['id'], 100)

    assert [r['id'] for r in service.filter_receivables('paid')] == [debt['id']]
    assert [r['id'] for r in service.filter_receivables('unpaid')] == ['R-1']
    assert len(service.filter_receivables('all')) == 2
    assert [r['id'] for r in service.filter_receivables('all', 'ana')] == ['R-1']


def test_receivables_summary(container):
    _new_debt(container, total=100)
    summary = container.receivables_service.receivables_summary()
    assert summary == {
        'total_receivables': 289.0,
        'total_paid': 50.0,
        'total_due': 239.0,
    }


def test_non_finite_amounts_rejected(container):
    service = container.receivables_service
    debt = _new_debt(container)

    for bad in (float('nan'), float('inf'), float('-inf')):
        result = service.add_payment(debt['id'], bad)
        assert not result['ok']

    stored = service.get_receivable(debt['id'])
    assert stored['amountPaid'] == 0.0
    assert stored['status'] == 'Unpaid'

    due = date.today().isoformat()
    assert not service.add_receivable('Carla', float('nan'), due)['ok']
    assert not service.add_receivable('Carla', float('inf'), due)['ok']


def test_customer_name_must_be_text(container):
    result = container.receivables_service.add_receivable(123, 10, date.today().isoformat())
    assert not result['ok']
