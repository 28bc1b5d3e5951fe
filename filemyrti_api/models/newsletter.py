from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, index=True, nullable=False)  # Stored lower-cased
    status = Column(String(20), nullable=False, default="active")  # active, unsubscribed
    subscribed_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
