# package marker for filemyrti_api.models

# Import all models to ensure relationships are properly initialized
from filemyrti_api.models.user import User
from filemyrti_api.models.service import Service
from filemyrti_api.models.state import State
from filemyrti_api.models.rti_application import RTIApplication
from filemyrti_api.models.payment_recovery import PaymentRecovery
from filemyrti_api.models.consultation import Consultation
from filemyrti_api.models.callback_request import CallbackRequest
from filemyrti_api.models.newsletter import NewsletterSubscription

__all__ = [
    "User",
    "Service",
    "State",
    "RTIApplication",
    "PaymentRecovery",
    "Consultation",
    "CallbackRequest",
    "NewsletterSubscription"
]
