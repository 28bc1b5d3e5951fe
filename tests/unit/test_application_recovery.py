"""
Unit tests for RTI application persistence and the payment recovery fallback.
"""
import logging
from unittest.mock import MagicMock

import pytest

from filemyrti_api.models.payment_recovery import PaymentRecovery
from filemyrti_api.schemas.rti_application import RTIApplicationCreate
from filemyrti_api.services import applications


@pytest.fixture
def payload(application_body):
    return RTIApplicationCreate(**application_body)


def _failing_create(error):
    def create_application(db, payload, user_id=None):
        raise error
    return create_application


class TestSubmitApplication:
    def test_persisted(self, db_session, payload, application_body):
        application = applications.submit_application(db_session, payload, application_body)

        assert application.id is not None
        assert application.status == "pending"
        assert application.email == "ravi@example.com"
        assert db_session.query(PaymentRecovery).count() == 0

    def test_failure_with_payment_ids_writes_recovery(self, db_session, payload, application_body, monkeypatch):
        monkeypatch.setattr(applications, "create_application", _failing_create(RuntimeError("disk full")))

        with pytest.raises(RuntimeError, match="disk full"):
            applications.submit_application(db_session, payload, application_body)

        recoveries = db_session.query(PaymentRecovery).all()
        assert len(recoveries) == 1
        recovery = recoveries[0]
        assert recovery.payment_id == "pay_Nx1qk0fU3b2Xy9"
        assert recovery.order_id == "order_Nx1pQ8nF0aL2mT"
        assert recovery.error_message == "disk full"
        assert recovery.request_body == application_body
        assert recovery.status == "pending"
        assert recovery.full_name == "Ravi Kumar"

    def test_failure_without_payment_ids_skips_recovery(self, db_session, application_body, monkeypatch):
        body = dict(application_body, payment_id=None, order_id=None)
        monkeypatch.setattr(applications, "create_application", _failing_create(RuntimeError("disk full")))

        with pytest.raises(RuntimeError):
            applications.submit_application(db_session, RTIApplicationCreate(**body), body)

        assert db_session.query(PaymentRecovery).count() == 0

    def test_failure_with_only_payment_id_skips_recovery(self, db_session, application_body, monkeypatch):
        body = dict(application_body, order_id="  ")
        monkeypatch.setattr(applications, "create_application", _failing_create(RuntimeError("disk full")))

        with pytest.raises(RuntimeError):
            applications.submit_application(db_session, RTIApplicationCreate(**body), body)

        assert db_session.query(PaymentRecovery).count() == 0

    def test_recovery_failure_still_raises_original(self, db_session, payload, application_body, monkeypatch, caplog):
        monkeypatch.setattr(applications, "create_application", _failing_create(RuntimeError("disk full")))
        monkeypatch.setattr(applications, "PaymentRecovery", MagicMock(side_effect=RuntimeError("no recovery table")))

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError, match="disk full"):
                applications.submit_application(db_session, payload, application_body)

        assert "Failed to create payment recovery record" in caplog.text
        assert "no recovery table" in caplog.text

    def test_repeated_failures_are_not_deduplicated(self, db_session, payload, application_body, monkeypatch):
        monkeypatch.setattr(applications, "create_application", _failing_create(RuntimeError("disk full")))

        for _ in range(2):
            with pytest.raises(RuntimeError):
                applications.submit_application(db_session, payload, application_body)

        assert db_session.query(PaymentRecovery).filter_by(payment_id="pay_Nx1qk0fU3b2Xy9").count() == 2


class TestViews:
    def test_application_view_includes_names(self, db_session, payload, application_body, service, state):
        application = applications.submit_application(db_session, payload, application_body)

        view = applications.application_view(application)

        assert view["service_name"] == service.name
        assert view["state_name"] == state.name
        assert view["user_name"] is None

    def test_notification_fields_truncate_query(self, db_session, payload, application_body):
        application = applications.submit_application(db_session, payload, application_body)
        application.rti_query = "x" * 600

        fields = applications.notification_fields(application, "Service", "State")

        assert fields["RTI Query"] == "x" * 500 + "..."
        assert fields["Payment ID"] == "pay_Nx1qk0fU3b2Xy9"
        assert "User ID" not in fields

    def test_notification_fields_for_authenticated_user(self, db_session, application_body):
        body = dict(application_body, rti_query=None, payment_id=None, order_id=None)
        application = applications.submit_application(db_session, RTIApplicationCreate(**body), body, user_id=None)

        fields = applications.notification_fields(application, "Service", "State", user_id=7)

        assert fields["User ID"] == 7
        assert fields["RTI Query"] == "(Not provided)"
        assert "Payment ID" not in fields

    def test_list_applications_filters_and_paginates(self, db_session, payload, application_body):
        created = [applications.submit_application(db_session, payload, application_body) for _ in range(3)]
        created[0].status = "completed"
        db_session.commit()

        page = applications.list_applications(db_session, {"status": "pending"}, page=1, limit=1)

        assert page["total"] == 2
        assert page["totalPages"] == 2
        assert len(page["applications"]) == 1
